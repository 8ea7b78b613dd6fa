from __future__ import annotations

import os

import pytest

from hearth.core.config.paths import ConfigFsPaths
from hearth.core.engine import PrivacyEngine


@pytest.fixture
def tmp_config_root(tmp_path):
    """
    Provides an isolated root with config/ under tmp_path.
    """
    fs = ConfigFsPaths(root=str(tmp_path))
    os.makedirs(fs.config_dir, exist_ok=True)
    return fs


@pytest.fixture
def sunrise_record():
    return {
        "id": "c1",
        "name": "Sunrise Circle",
        "content": "gathering notes",
        "culturalContext": {"tradition": "X"},
    }


@pytest.fixture
def engine():
    return PrivacyEngine()
