from __future__ import annotations

import os
from typing import Optional

from hearth.core.config.models import EngineConfigFile
from hearth.core.crypto import RandomSource
from hearth.core.engine import PrivacyEngine
from hearth.core.error_reporter import ErrorReporter, ErrorReporterConfig
from hearth.core.events import EventLogger
from hearth.core.logger import setup_logging
from hearth.core.security_events import SecurityAuditLogger


def build_privacy_engine(cfg: EngineConfigFile, *, random_source: Optional[RandomSource] = None, stream_logs: bool = True) -> PrivacyEngine:
    logs_dir = cfg.logs_dir
    logger = setup_logging(logs_dir, level=cfg.log_level, stream=stream_logs) if cfg.text_log_enabled else None
    return PrivacyEngine(
        random_source=random_source,
        logger=logger,
        event_logger=EventLogger(os.path.join(logs_dir, "events.jsonl")) if cfg.events_enabled else None,
        audit_logger=SecurityAuditLogger(os.path.join(logs_dir, "security.log")) if cfg.audit_enabled else None,
        error_reporter=ErrorReporter(
            path=os.path.join(logs_dir, "errors.jsonl"),
            cfg=ErrorReporterConfig(include_tracebacks=cfg.include_tracebacks),
        ),
    )
