from __future__ import annotations

import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from hearth.core.config.io import atomic_write_json, read_json_file, recover_from_corrupt, snapshot_last_known_good
from hearth.core.config.models import EngineConfigFile, default_engine_config_dict
from hearth.core.config.paths import ConfigFsPaths
from hearth.core.errors import ConfigError


class ConfigManager:
    def __init__(self, *, fs: Optional[ConfigFsPaths] = None, logger=None, read_only: bool = False):
        self.fs = fs or ConfigFsPaths(".")
        self.logger = logger
        self.read_only = read_only
        self._cfg: Optional[EngineConfigFile] = None

    # ---------- public API ----------
    def load(self) -> EngineConfigFile:
        """
        Read config/engine.json, creating it with defaults when missing.

        A corrupt file is moved aside and last-known-good is restored (or defaults
        used). Schema violations are not repaired: they raise ConfigError.
        """
        raw = self._read_raw()
        cfg = self._validate(raw)
        self._cfg = cfg
        if not self.read_only and os.path.exists(self.fs.engine):
            snapshot_last_known_good(self.fs.engine, self.fs.last_known_good_dir)
        return cfg

    def get(self) -> EngineConfigFile:
        if self._cfg is None:
            raise ConfigError("Config not loaded.")
        return self._cfg

    def save(self, data: Dict[str, Any]) -> EngineConfigFile:
        """Validate, then atomic write with a pre-write backup."""
        if self.read_only:
            raise ConfigError("Config manager is read-only.")
        if not isinstance(data, dict):
            raise ConfigError("Config data must be an object.")
        cfg = self._validate(data)
        max_backups = self._cfg.max_backups if self._cfg is not None else cfg.max_backups
        atomic_write_json(self.fs.engine, cfg.model_dump(), self.fs.backups_dir, max_backups=max_backups)
        return self.load()

    # ---------- internals ----------
    def _read_raw(self) -> Dict[str, Any]:
        path = self.fs.engine
        rr = read_json_file(path)
        if rr.ok:
            return rr.data
        if rr.corrupt:
            if self.read_only:
                raise ConfigError("engine.json is corrupt.", error=rr.error)
            data, recovered = recover_from_corrupt(path, self.fs.backups_dir, self.fs.last_known_good_dir)
            if self.logger:
                self.logger.warning(f"engine.json corrupt; {'restored last known good' if recovered else 'using defaults'}")
            if recovered:
                return data
        elif rr.error != "missing":
            raise ConfigError("engine.json could not be read.", error=rr.error)
        defaults = default_engine_config_dict()
        if not self.read_only:
            atomic_write_json(path, defaults, self.fs.backups_dir)
        return defaults

    def _validate(self, raw: Dict[str, Any]) -> EngineConfigFile:
        try:
            return EngineConfigFile.model_validate(raw)
        except ValidationError as e:
            raise ConfigError("engine.json failed validation.", errors=e.error_count()) from e
