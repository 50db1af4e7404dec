import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError

from otf_level.api.binding import decode_level_fields
from otf_level.config import ServiceSettings
from otf_level.models.level import LevelRequest, LevelResponse
from otf_level.scoring.level_calculator import UnsupportedLevelMethodError, calculate_level, ensure_supported_method
from otf_level.services.scale_lookup import ScaleLookupClient, ScaleLookupError

LOGGER = logging.getLogger(__name__)

router = APIRouter(tags=["Level"])


def get_scale_lookup(request: Request) -> ScaleLookupClient:
    return request.app.state.scale_lookup


def get_service_settings(request: Request) -> ServiceSettings:
    return request.app.state.settings


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "body"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


@router.get("/")
def ping() -> str:
    return "OK"


@router.post("/level", response_model=LevelResponse)
async def calculate_scaled_level(
    request: Request,
    scale_lookup: ScaleLookupClient = Depends(get_scale_lookup),
    settings: ServiceSettings = Depends(get_service_settings),
) -> LevelResponse:
    fields = await decode_level_fields(request)
    try:
        payload = LevelRequest.model_validate(fields)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_validation_message(exc)) from exc

    try:
        ensure_supported_method(payload.levelMethod)
        scale = await scale_lookup.fetch_scale(payload.levelProgLevel)
        calculated = calculate_level(payload, scale)
    except UnsupportedLevelMethodError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except ScaleLookupError as exc:
        LOGGER.warning("Scale lookup failed for %s: %s", payload.levelProgLevel, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    return LevelResponse(
        calculatedLevel=calculated,
        levelMethod=payload.levelMethod,
        assessmentScore=payload.assessmentScore,
        assessmentToken=payload.assessmentToken,
        levelServiceID=settings.id,
        levelServiceName=settings.name,
    )
