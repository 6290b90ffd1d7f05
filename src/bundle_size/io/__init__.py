"""Filesystem-facing components: filtering, measurement and history."""
