import json
import logging
from datetime import datetime, timezone
from typing import Any


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    outcome: str,
    trace_id: str | None = None,
    **context: Any,
) -> None:
    level = logging.WARNING if outcome in {"error", "failed"} else logging.INFO
    logger.log(
        level,
        json.dumps(
            {
                "ts": datetime.now(timezone.utc).isoformat(),
                "level": logging.getLevelName(level),
                "module": module,
                "action": action,
                "outcome": outcome,
                "trace_id": trace_id,
                **context,
            },
            default=str,
        ),
    )
