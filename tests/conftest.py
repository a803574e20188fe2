"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import logging
import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local opsprune package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of opsprune modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("opsprune"):
        del sys.modules[module_name]

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory of the TypeScript fixture projects."""
    return FIXTURES_DIR


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user-level config and OPSPRUNE__ env vars out of tests."""
    import opsprune.config.loader as loader

    home = tmp_path_factory.mktemp("home")
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", home / "config.yaml")
    for key in list(os.environ):
        if key.startswith("OPSPRUNE__"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop handlers bound to streams of a finished CliRunner invocation."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
