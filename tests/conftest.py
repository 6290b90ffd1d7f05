"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add src to Python path for imports
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

# Import after path setup
from bundle_size.core.logging import setup_logging
from bundle_size.core.models import OutputFile


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Set up logging for all tests."""
    setup_logging(level="ERROR")  # Reduce noise during tests


@pytest.fixture
def project_root_dir():
    """Provide the project root directory path."""
    return project_root


@pytest.fixture
def make_outputs():
    """Build an outputs mapping from name -> content."""
    def _make(contents, chunks=None):
        outputs = {}
        for name, content in contents.items():
            is_chunk = name.endswith(('.js', '.mjs')) if chunks is None else name in chunks
            outputs[name] = OutputFile(name=name, code=content, is_chunk=is_chunk)
        return outputs
    return _make


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Keep host environment variables and .env files out of config loading."""
    import os
    for key in list(os.environ):
        if key.startswith("BUNDLE_SIZE_") or key in ("LOG_LEVEL", "LOG_FORMAT", "LOG_FILE"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
