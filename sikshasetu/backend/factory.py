# sikshasetu/backend/factory.py
from __future__ import annotations

import logging
from urllib.parse import urlparse

from sikshasetu.backend.base import Backend
from sikshasetu.backend.disabled import build_disabled_backend
from sikshasetu.core.config import Settings

log = logging.getLogger(__name__)


def _usable_url(url: str | None) -> bool:
    if not url:
        return False
    parsed = urlparse(url)
    return bool(parsed.scheme)


def build_backend(settings: Settings) -> Backend:
    """
    Chosen once per process. Call sites never check which variant they got.
    """
    if not _usable_url(settings.database_url):
        log.error("backend not configured; running with data features disabled")
        return build_disabled_backend()

    from sikshasetu.backend.sql import build_sql_backend

    return build_sql_backend(settings)
