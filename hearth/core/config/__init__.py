from __future__ import annotations

from hearth.core.config.manager import ConfigManager
from hearth.core.config.models import EngineConfigFile
from hearth.core.config.paths import ConfigFsPaths

__all__ = ["ConfigFsPaths", "ConfigManager", "EngineConfigFile"]
