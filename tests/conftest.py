import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cent import reset_config


@pytest.fixture(autouse=True)
def clean_config():
    """Every test starts and ends with the default configuration."""
    reset_config()
    yield
    reset_config()
