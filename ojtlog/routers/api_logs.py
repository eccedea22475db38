"""HTTP endpoints for daily log entries.

Every route goes through ``LogRepository``; a ``None`` from the repository
becomes a 404 here, and repository errors are mapped by the app-level
exception handlers.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..deps.services import get_log_repository
from ..schemas.log import ImportResult, LegacyStatus, LogEntry, LogEntryForm, LogPage, TotalHours
from ..services.log_repository import LogRepository

router = APIRouter(prefix="/api/v1/logs", tags=["logs"])


@router.get("", response_model=LogPage)
async def api_list(page: int = Query(default=0, ge=0), repo: LogRepository = Depends(get_log_repository)):
    return await repo.list_page(page)


@router.get("/total", response_model=TotalHours)
async def api_total(repo: LogRepository = Depends(get_log_repository)):
    return TotalHours(total_hours=await repo.get_total_hours())


@router.get("/legacy", response_model=LegacyStatus)
def api_legacy_status(repo: LogRepository = Depends(get_log_repository)):
    return LegacyStatus(has_legacy_data=repo.has_legacy_local_data())


@router.post("/legacy/import", response_model=ImportResult)
async def api_legacy_import(repo: LogRepository = Depends(get_log_repository)):
    return await repo.import_legacy_local_data()


@router.get("/{log_id}", response_model=LogEntry)
async def api_get(log_id: str, repo: LogRepository = Depends(get_log_repository)):
    entry = await repo.get_by_id(log_id)
    if entry is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Not found")
    return entry


@router.post("", response_model=LogEntry, status_code=status.HTTP_201_CREATED)
async def api_create(payload: LogEntryForm, repo: LogRepository = Depends(get_log_repository)):
    return await repo.create(payload)


@router.put("/{log_id}", response_model=LogEntry)
async def api_update(log_id: str, payload: LogEntryForm, repo: LogRepository = Depends(get_log_repository)):
    entry = await repo.update(log_id, payload)
    if entry is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Not found")
    return entry


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def api_delete(log_id: str, repo: LogRepository = Depends(get_log_repository)):
    await repo.delete(log_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
