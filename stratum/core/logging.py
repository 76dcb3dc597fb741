# stratum/core/logging.py

import logging
import sys
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from stratum.core.config import Settings, settings as default_settings

# LogRecord attributes set by RpcClient through `extra`
EXCHANGE_FIELDS = ("rpc_method", "rpc_id")


def exchange_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Request method and id attached to a record, if any"""
    return {
        field: getattr(record, field)
        for field in EXCHANGE_FIELDS
        if hasattr(record, field)
    }


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(exchange_context(record))

        return json.dumps(log_data, default=str)


class SimpleFormatter(logging.Formatter):
    """Human-readable formatter for terminals"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        log_line = f"[{timestamp}] {record.levelname:8s} | {record.name:20s} | {record.getMessage()}"

        context = exchange_context(record)
        if "rpc_method" in context:
            log_line += f" [{context['rpc_method']}#{context.get('rpc_id')}]"

        if record.exc_info:
            log_line += f"\n{self.formatException(record.exc_info)}"

        return log_line


def setup_logging(config: Optional[Settings] = None) -> None:
    """
    Configure logging for command-line use

    The library itself never calls this; applications embedding the client
    keep their own logging configuration.

    Args:
        config: Settings to read LOG_LEVEL and LOG_FORMAT from (defaults to
            the module-level settings)
    """
    config = config or default_settings
    log_level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    # stderr keeps stdout free for call results
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)

    if config.LOG_FORMAT.lower() == "json":
        formatter = JSONFormatter()
    else:
        formatter = SimpleFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug(
        f"Logging configured: level={config.LOG_LEVEL}, format={config.LOG_FORMAT}"
    )
