from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EngineConfigFile(BaseModel):
    """
    config/engine.json schema.

    Only observability wiring lives here. Neither the default privacy policy
    nor the scrypt cost is configurable.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: int = Field(default=1, ge=1, le=10)
    logs_dir: str = Field(default="logs", min_length=1)
    text_log_enabled: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    events_enabled: bool = True
    audit_enabled: bool = True
    include_tracebacks: bool = False
    backups: Dict[str, Any] = Field(default_factory=lambda: {"max_backups_per_file": 10})

    @field_validator("backups")
    @classmethod
    def _backups(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        n = v.get("max_backups_per_file", 10)
        if not isinstance(n, int) or isinstance(n, bool) or n < 1:
            raise ValueError("backups.max_backups_per_file must be a positive integer")
        return v

    @property
    def max_backups(self) -> int:
        return int(self.backups.get("max_backups_per_file", 10))


def default_engine_config_dict() -> Dict[str, Any]:
    return EngineConfigFile().model_dump()
