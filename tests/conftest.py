import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from ltvis.config import Config
from ltvis.core.session import Session
from ltvis.viz.renderer import Renderer


@pytest.fixture(autouse=True)
def _restore_config():
    """Reset :class:`Config` to its defaults after each test."""

    saved = Config.snapshot()
    yield
    Config.restore(saved)


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def renderer() -> Renderer:
    return Renderer()

