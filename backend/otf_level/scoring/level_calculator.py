from otf_level.models.level import CalculatedLevel, LevelRequest, ScaleRecord

ACHIEVEMENT_MASTERED = "mastered"
ACHIEVEMENT_PARTIAL = "partially achieved"

SUPPORTED_LEVEL_METHODS: frozenset[str] = frozenset({"prescribed", "mapped"})

MASTERED_TOKENS: frozenset[str] = frozenset({"mastered", "fully mastered"})
PARTIAL_TOKENS: frozenset[str] = frozenset({"intermittent", "partial", "satisfied"})


class UnsupportedLevelMethodError(ValueError):
    def __init__(self, method: str) -> None:
        super().__init__(f"levelMethod not supported: {method!r} (expected one of {sorted(SUPPORTED_LEVEL_METHODS)})")
        self.method = method


def ensure_supported_method(method: str) -> None:
    if method not in SUPPORTED_LEVEL_METHODS:
        raise UnsupportedLevelMethodError(method)


def classify_assessment_token(token: str | None) -> str:
    """Map a judgement token onto an achievement band.

    Anything that is not a recognised mastery token lands in the partial
    band, including empty and unknown tokens.
    """
    if token in MASTERED_TOKENS:
        return ACHIEVEMENT_MASTERED
    if token in PARTIAL_TOKENS:
        return ACHIEVEMENT_PARTIAL
    return ACHIEVEMENT_PARTIAL


def calculate_level(request: LevelRequest, scale: ScaleRecord) -> CalculatedLevel:
    ensure_supported_method(request.levelMethod)

    # assessmentScore and the low/high bounds do not take part in the decision.
    achievement = classify_assessment_token(request.assessmentToken)
    if achievement == ACHIEVEMENT_MASTERED:
        scaled_score = scale.achieved
    else:
        scaled_score = scale.partiallyAchieved

    return CalculatedLevel(
        achievement=achievement,
        progressionLevel=request.levelProgLevel,
        scaledScore=scaled_score,
    )
