"""
Global pytest configuration for the project.

Adds the project root to sys.path so the top-level packages (configs,
core, exceptions, runtime, cli) import the same way they do when the
project is run from a checkout.
"""
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent

if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture
def memory_store():
    from fakes import MemoryFileStore

    return MemoryFileStore()


@pytest.fixture
def local_store(tmp_path):
    from runtime.store.local_file_store import LocalFileStore

    return LocalFileStore({"dataDirectory": tmp_path / "logs"})
