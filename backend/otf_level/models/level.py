from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LevelRequest(BaseModel):
    # blank and whitespace-only values are rejected the same way from every binding source
    model_config = ConfigDict(str_strip_whitespace=True)

    levelMethod: str = Field(..., min_length=1)
    levelProgLevel: str = Field(..., min_length=1)
    assessmentScore: int | None = None
    assessmentToken: str | None = None


class ScaleRecord(BaseModel):
    """Achievement thresholds registered for one progression level.

    Only ``achieved`` and ``partiallyAchieved`` drive scoring and are strictly
    validated; the remaining fields are informational and degrade to ``None``.
    """

    achieved: int
    partiallyAchieved: int
    low: int | None = None
    high: int | None = None
    progressionLevel: str | None = None
    scaleItemId: str | None = None

    @field_validator("low", "high", mode="before")
    @classmethod
    def _lenient_bound(cls, value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(str(value).strip())
        except ValueError:
            return None

    @field_validator("progressionLevel", "scaleItemId", mode="before")
    @classmethod
    def _lenient_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class CalculatedLevel(BaseModel):
    achievement: str
    progressionLevel: str
    scaledScore: int


class LevelResponse(BaseModel):
    calculatedLevel: CalculatedLevel
    levelMethod: str
    assessmentScore: int | None = None
    assessmentToken: str | None = None
    levelServiceID: str
    levelServiceName: str
