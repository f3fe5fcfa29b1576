"""
Shared pytest fixtures for karasu-config tests.

Every test starts from a clean process-wide state: no ``KARASU_CONFIG_*``
environment overrides, fresh settings and a fresh default codec.
"""

import os
import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parent.parent
# Put `src/` first so `import karasu_config` uses workspace code.
sys.path.insert(0, str(_REPO_ROOT / "src"))
# Put repo root early so `import tests.*` resolves locally.
sys.path.insert(1, str(_REPO_ROOT))

from karasu_config import codec, settings  # noqa: E402
from karasu_config.persistence import ConfigStore  # noqa: E402
from karasu_config.registry import ConfigRegistry  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_library_state(monkeypatch):
    for key in list(os.environ):
        if key.startswith(settings.ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    settings.reset_settings()
    codec.reset_codec()
    yield
    settings.reset_settings()
    codec.reset_codec()


# ============================================================================
# File System Fixtures
# ============================================================================


@pytest.fixture
def plugins_dir(tmp_path: Path) -> Path:
    """Parent folder shared by every host's data folder."""
    return tmp_path / "plugins"


@pytest.fixture
def data_root(plugins_dir: Path) -> Path:
    """Data folder of the host under test (not created up front)."""
    return plugins_dir / "HostPlugin"


@pytest.fixture
def store(data_root: Path) -> ConfigStore:
    return ConfigStore("HostPlugin", data_root)


@pytest.fixture
def registry(data_root: Path) -> ConfigRegistry:
    return ConfigRegistry("HostPlugin", data_root)
