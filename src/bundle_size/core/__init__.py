"""Snapshot, diff, report and pipeline core."""
