import logging
import sys

from pythonjsonlogger import jsonlogger

from sikshasetu.core.config import Settings
from sikshasetu.core.middleware import request_id_var


class ContextFilter(logging.Filter):
    """Stamps service, environment and the current request id on each record."""

    def __init__(self, service: str, environment: str):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        record.service = self.service
        record.env = self.environment
        return True


def configure_logging(settings: Settings) -> None:
    """
    JSON lines on stdout. Safe to call again (tests build many apps).
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)

    out = logging.StreamHandler(sys.stdout)
    out.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(service)s %(env)s %(request_id)s %(message)s",
            rename_fields={"asctime": "ts", "levelname": "level", "name": "logger"},
        )
    )
    out.addFilter(ContextFilter(settings.app_name, settings.environment))
    root.addHandler(out)

    for name in ("uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).setLevel(level)
    # SQL echo only when explicitly debugging
    logging.getLogger("sqlalchemy.engine").setLevel(max(level, logging.WARNING))
