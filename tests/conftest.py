import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'mason'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from mason.core.defer import MarkerGenerator  # noqa: E402
from mason.core.logging_setup import reset_logging_for_tests  # noqa: E402
from mason.core.request import Request  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_mason_env(monkeypatch, tmp_path):
    """Tests must not see MASON_* overrides or a developer's .mason/ directory."""
    for key in list(os.environ):
        if key.startswith("MASON_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    reset_logging_for_tests()


@pytest.fixture
def default_config():
    """Bundled defaults, loaded once per test without project overlays."""
    from mason.core.config import ConfigManager

    return ConfigManager(repo_root=Path("/nonexistent-mason-root")).load_config(validate=True)


@pytest.fixture
def markers():
    """Deterministic marker generator."""
    return MarkerGenerator(salt="test")


@pytest.fixture
def request_factory(default_config, markers):
    """Build Requests wired to bundled defaults and deterministic markers."""
    def make(**kwargs):
        kwargs.setdefault("config", default_config)
        kwargs.setdefault("marker_generator", markers)
        return Request(**kwargs)
    return make
