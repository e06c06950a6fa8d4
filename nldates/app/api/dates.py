"""
Date parsing API endpoints.
"""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from nldates.app.core.config import WEEK_START_CHOICES
from nldates.app.services.commands import handle_open_action, render_parse_command
from nldates.app.services.date_service import get_date_service
from nldates.app.services.suggest import get_suggestions, select_suggestion


router = APIRouter(prefix="/api/v1/dates", tags=["dates"])


class ParseResponse(BaseModel):
    formatted_string: str
    date: Optional[str] = None
    is_valid: bool


class CommandRequest(BaseModel):
    text: str
    mode: Literal["replace", "link", "clean", "time"] = "replace"


class CommandResponse(BaseModel):
    replacement: str


class SelectRequest(BaseModel):
    label: str
    include_alias: bool = False


class SettingsUpdate(BaseModel):
    date_format: Optional[str] = Field(default=None, min_length=1)
    time_format: Optional[str] = Field(default=None, min_length=1)
    separator: Optional[str] = None
    week_start: Optional[str] = None
    locale: Optional[str] = Field(default=None, min_length=2)
    autosuggest_enabled: Optional[bool] = None
    autosuggest_trigger_phrase: Optional[str] = Field(default=None, min_length=1)
    autosuggest_toggle_link: Optional[bool] = None
    use_markdown_links: Optional[bool] = None


def _settings_payload() -> dict:
    s = get_date_service().settings
    return {
        "date_format": s.date_format,
        "time_format": s.time_format,
        "separator": s.separator,
        "week_start": s.week_start,
        "locale": s.locale,
        "autosuggest_enabled": s.autosuggest_enabled,
        "autosuggest_trigger_phrase": s.autosuggest_trigger_phrase,
        "autosuggest_toggle_link": s.autosuggest_toggle_link,
        "use_markdown_links": s.use_markdown_links,
    }


@router.get("/parse", response_model=ParseResponse)
async def parse(text: str = Query(..., min_length=1), format: Optional[str] = None):
    service = get_date_service()
    result = service.parse(text, format) if format else service.parse_date(text)
    return result.to_dict()


@router.get("/parse-time", response_model=ParseResponse)
async def parse_time(text: str = Query(..., min_length=1)):
    return get_date_service().parse_time(text).to_dict()


@router.post("/command", response_model=CommandResponse)
async def command(payload: CommandRequest):
    replacement = render_parse_command(get_date_service(), payload.text, payload.mode)
    if replacement is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Could not parse date: {payload.text}")
    return {"replacement": replacement}


@router.get("/now")
async def now():
    return {"value": get_date_service().now_string()}


@router.get("/today")
async def today():
    return {"value": get_date_service().today_string()}


@router.get("/time")
async def current_time():
    return {"value": get_date_service().time_string()}


@router.get("/suggest")
async def suggest(query: str = ""):
    return {"suggestions": get_suggestions(query)}


@router.post("/suggest/select")
async def suggest_select(payload: SelectRequest):
    return {"replacement": select_suggestion(get_date_service(), payload.label, payload.include_alias)}


@router.get("/open")
async def open_daily_note(day: Optional[str] = None, newPane: Optional[str] = None):
    try:
        target = handle_open_action(get_date_service(), day, newPane)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if target is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Could not parse date: {day}")
    return {
        "day": target.day,
        "date": target.date.isoformat(),
        "note": target.note_name,
        "new_pane": target.new_pane,
    }


@router.get("/settings")
async def read_settings():
    return _settings_payload()


@router.put("/settings")
async def update_settings(payload: SettingsUpdate):
    changes = payload.model_dump(exclude_none=True)
    week_start = changes.get("week_start")
    if week_start is not None:
        week_start = week_start.strip().lower()
        if week_start not in WEEK_START_CHOICES:
            raise HTTPException(status_code=422, detail=f"Unknown week start: {week_start}")
        changes["week_start"] = week_start
    service = get_date_service()
    service.update_settings(service.settings.with_updates(**changes))
    return _settings_payload()
