"""Record, statistics, preferences and backup endpoints."""

from __future__ import annotations

import json
from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse

from kcalcal.api.schemas import (
    DailyStatsOut,
    FoodRecordIn,
    FoodRecordOut,
    GoalProgressOut,
    PreferencesOut,
    PreferencesUpdate,
    RecordCreated,
    RestoreResultOut,
    WeeklyStatsOut,
)

if TYPE_CHECKING:
    from kcalcal.containers import AppContainer

router = APIRouter()


@router.get("/records")
async def list_records(request: Request) -> list[FoodRecordOut]:
    """Return all records, oldest first."""
    container: AppContainer = request.app.state.container
    return [
        FoodRecordOut.model_validate(record)
        for record in container.record_service.get_all()
    ]


@router.post("/records", status_code=status.HTTP_201_CREATED)
async def create_record(payload: FoodRecordIn, request: Request) -> RecordCreated:
    """Store a confirmed analysis as a new record."""
    container: AppContainer = request.app.state.container
    record_id = container.record_service.save(payload.to_domain())
    return RecordCreated(id=record_id)


@router.delete("/records/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(record_id: int, request: Request) -> Response:
    """Delete a record."""
    container: AppContainer = request.app.state.container
    container.record_service.delete(record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/stats/daily")
async def daily_stats(
    request: Request, day: date | None = Query(default=None, alias="date")
) -> DailyStatsOut:
    """Return totals for a day (default today)."""
    container: AppContainer = request.app.state.container
    return DailyStatsOut.model_validate(container.stats_service.daily(day))


@router.get("/stats/weekly")
async def weekly_stats(request: Request) -> WeeklyStatsOut:
    """Return totals for the trailing seven days."""
    container: AppContainer = request.app.state.container
    return WeeklyStatsOut.model_validate(container.stats_service.weekly())


@router.get("/stats/goal")
async def goal_progress(
    request: Request, day: date | None = Query(default=None, alias="date")
) -> GoalProgressOut:
    """Return calorie goal progress for a day (default today)."""
    container: AppContainer = request.app.state.container
    report = container.stats_service.goal_progress(day)
    progress = report.progress
    return GoalProgressOut(
        date=report.date,
        goal_calories=progress.goal_calories,
        current_calories=progress.current_calories,
        percentage=progress.percentage,
        remaining=progress.remaining,
        status=progress.status,
    )


@router.get("/preferences")
async def get_preferences(request: Request) -> PreferencesOut:
    """Return stored preferences with defaults applied."""
    container: AppContainer = request.app.state.container
    preferences = container.preferences_service
    return PreferencesOut(
        goal_calories=preferences.goal_calories(), model=preferences.model()
    )


@router.put("/preferences")
async def update_preferences(
    payload: PreferencesUpdate, request: Request
) -> PreferencesOut:
    """Update the goal and/or preferred model."""
    container: AppContainer = request.app.state.container
    preferences = container.preferences_service
    try:
        if payload.goal_calories is not None:
            preferences.set_goal_calories(payload.goal_calories)
        if payload.model is not None:
            preferences.set_model(payload.model)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return PreferencesOut(
        goal_calories=preferences.goal_calories(), model=preferences.model()
    )


@router.get("/backup")
async def export_backup(request: Request) -> JSONResponse:
    """Return all records and settings as a backup document."""
    container: AppContainer = request.app.state.container
    backup = container.backup_service.export_backup()
    return JSONResponse(backup.model_dump(mode="json", by_alias=True))


@router.post("/backup/restore")
async def restore_backup(request: Request) -> JSONResponse:
    """Import a backup document."""
    container: AppContainer = request.app.state.container
    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        data = None
    result = container.backup_service.restore_backup(data)
    body = RestoreResultOut.model_validate(result).model_dump(by_alias=True)
    return JSONResponse(
        body,
        status_code=(
            status.HTTP_200_OK if result.success else status.HTTP_400_BAD_REQUEST
        ),
    )
