from __future__ import annotations

from fastapi import Depends, Request

from ..services.app_settings import AppSettingsStore
from ..services.identity import StaticIdentity
from ..services.log_repository import LogRepository
from .auth import current_identity


def get_log_repository(
    request: Request,
    identity: StaticIdentity = Depends(current_identity),
) -> LogRepository:
    # Store, cache and legacy archive are process-wide; only the identity is per request.
    state = request.app.state
    return LogRepository(
        state.log_store,
        identity,
        cache=state.log_cache,
        legacy=state.legacy_archive,
        page_size=state.settings.LOG_PAGE_SIZE,
        break_window=state.break_window,
    )


def get_settings_store(request: Request) -> AppSettingsStore:
    return request.app.state.settings_store
