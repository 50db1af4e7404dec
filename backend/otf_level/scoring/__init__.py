from otf_level.scoring.level_calculator import (
    ACHIEVEMENT_MASTERED,
    ACHIEVEMENT_PARTIAL,
    SUPPORTED_LEVEL_METHODS,
    UnsupportedLevelMethodError,
    calculate_level,
    classify_assessment_token,
    ensure_supported_method,
)

__all__ = [
    "ACHIEVEMENT_MASTERED",
    "ACHIEVEMENT_PARTIAL",
    "SUPPORTED_LEVEL_METHODS",
    "UnsupportedLevelMethodError",
    "calculate_level",
    "classify_assessment_token",
    "ensure_supported_method",
]
