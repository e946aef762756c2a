"""
Logs applicatifs (structlog branché sur logging stdlib).
- setup_logging: configure structlog et le handler racine; les logs stdlib des modules
  (logging.getLogger(__name__)) passent par le même rendu (JSON ou console).
- get_event_logger: dépendance FastAPI qui fournit le logger d'événements structurés
  (nom d'événement + champs, contexte via bind()).
"""
import logging
import sys
from typing import List, Optional

import structlog
from structlog.types import EventDict, Processor

from hiringkit.config import LOG_LEVEL, LOG_JSON

EVENTS_LOGGER = "hiringkit.events"

EventLogger = structlog.stdlib.BoundLogger

def drop_none_fields(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Les champs à None (ex: user_id d'un invité) ne sont pas émis."""
    return {k: v for k, v in event_dict.items() if v is not None}

def setup_logging(level: Optional[str] = None, json_format: Optional[bool] = None) -> None:
    log_level = level or LOG_LEVEL
    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)
    as_json = LOG_JSON if json_format is None else json_format

    pre_chain: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        drop_none_fields,
    ]
    if as_json:
        renderer: Processor = structlog.processors.JSONRenderer()
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(stream_handler)
    root_logger.setLevel(numeric_level)

    # Bruit des clients HTTP (supabase/stripe passent par httpx/requests)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)

def get_event_logger() -> EventLogger:
    """Dépendance FastAPI: logger d'événements structurés."""
    return structlog.get_logger(EVENTS_LOGGER)
