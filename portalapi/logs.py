"""Logger set-up: JSON lines in production, readable lines otherwise."""

import json
import logging
import os
import sys
from typing import Mapping, Optional

LOGGER_NAME = "portalapi"


class _Formatter(logging.Formatter):
    def __init__(self, production: bool) -> None:
        super().__init__("%(asctime)s\t%(levelname)s\t%(module)s:%(lineno)d\t%(message)s")
        self.production = production

    def format(self, record: logging.LogRecord) -> str:
        fields = getattr(record, "fields", None) or {}
        if not self.production:
            text = super().format(record)
            return text + "\t" + json.dumps(fields, default=str) if fields else text
        entry = {
            "level": record.levelname.lower(),
            "ts": record.created,
            "logger": record.name,
            "caller": f"{record.module}:{record.lineno}",
            "msg": record.getMessage(),
            **fields,
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def init_logger(env: Optional[Mapping[str, str]] = None) -> logging.Logger:
    """Configure and return the application logger according to APP_ENV."""
    env = os.environ if env is None else env
    production = env.get("APP_ENV") == "production"
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_Formatter(production))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO if production else logging.DEBUG)
    logger.propagate = False
    return logger