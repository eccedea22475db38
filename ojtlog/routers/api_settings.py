from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps.services import get_log_repository, get_settings_store
from ..schemas.app_settings import AppSettings, Progress
from ..services.app_settings import AppSettingsStore
from ..services.log_repository import LogRepository
from ..services.progress import build_progress

router = APIRouter(prefix="/api/v1", tags=["settings"])


@router.get("/settings", response_model=AppSettings)
def api_get_settings(store: AppSettingsStore = Depends(get_settings_store)):
    return store.load()


@router.put("/settings", response_model=AppSettings)
def api_put_settings(payload: AppSettings, store: AppSettingsStore = Depends(get_settings_store)):
    return store.save(payload)


@router.get("/progress", response_model=Progress)
async def api_progress(
    repo: LogRepository = Depends(get_log_repository),
    store: AppSettingsStore = Depends(get_settings_store),
):
    total = await repo.get_total_hours()
    return build_progress(total, store.load().target_hours)
