from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from unitengine.api.routes_units import router as units_router
from unitengine.core.settings import (
    CalendarSettings,
    Settings,
    StrideStyle,
    UnitSystem,
    get_settings,
    stride_style_descriptions,
    update_settings,
)
from unitengine.units.convert import IncompatibleUnitsError
from unitengine.units.registry import UnknownUnitError
from unitengine.version import __version__

# -----------------------------------------------------------------------------
# App setup
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)

app = FastAPI(title="unitengine API", version=__version__)
app.include_router(units_router)


@app.exception_handler(UnknownUnitError)
async def handle_unknown_unit(request: Request, exc: UnknownUnitError):
    logger.debug("Unknown unit %r requested at %s", exc.key, request.url.path)
    return JSONResponse(status_code=404, content={"error": "UNKNOWN_UNIT", "message": str(exc)})


@app.exception_handler(IncompatibleUnitsError)
async def handle_incompatible_units(request: Request, exc: IncompatibleUnitsError):
    return JSONResponse(
        status_code=422,
        content={
            "error": "INCOMPATIBLE_UNITS",
            "message": str(exc),
            "source": exc.source,
            "target": exc.target,
        },
    )


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------
class SettingsModel(BaseModel):
    unit_system: UnitSystem
    stride_style: StrideStyle
    first_weekday: int
    timezone: str
    stride_style_descriptions: List[str] = Field(default_factory=list)


class SettingsUpdate(BaseModel):
    unit_system: Optional[UnitSystem] = None
    stride_style: Optional[StrideStyle] = None
    first_weekday: Optional[int] = Field(default=None, ge=0, le=6)
    timezone: Optional[str] = None


def _settings_model(settings: Settings) -> SettingsModel:
    return SettingsModel(
        unit_system=settings.unit_system,
        stride_style=settings.stride_style,
        first_weekday=settings.calendar.first_weekday,
        timezone=settings.calendar.timezone,
        stride_style_descriptions=stride_style_descriptions(),
    )


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "version": __version__}


@app.get("/v1/settings", response_model=SettingsModel)
def read_settings() -> SettingsModel:
    return _settings_model(get_settings())


@app.put("/v1/settings", response_model=SettingsModel)
def write_settings(req: SettingsUpdate) -> SettingsModel:
    current = get_settings()
    changes = {}
    if req.unit_system is not None:
        changes["unit_system"] = req.unit_system
    if req.stride_style is not None:
        changes["stride_style"] = req.stride_style
    if req.first_weekday is not None or req.timezone is not None:
        try:
            changes["calendar"] = CalendarSettings(
                first_weekday=(
                    req.first_weekday
                    if req.first_weekday is not None
                    else current.calendar.first_weekday
                ),
                timezone=req.timezone if req.timezone is not None else current.calendar.timezone,
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail={"message": str(exc)})
    return _settings_model(update_settings(**changes))


__all__ = ["app"]
