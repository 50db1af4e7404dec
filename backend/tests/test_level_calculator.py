import unittest

from otf_level.models.level import LevelRequest, ScaleRecord
from otf_level.scoring.level_calculator import (
    ACHIEVEMENT_MASTERED,
    ACHIEVEMENT_PARTIAL,
    UnsupportedLevelMethodError,
    calculate_level,
    classify_assessment_token,
    ensure_supported_method,
)

SCALE = ScaleRecord(achieved=450, partiallyAchieved=380, low=300, high=500)


def _request(token: str | None, method: str = "prescribed", score: int | None = None) -> LevelRequest:
    return LevelRequest(
        levelMethod=method,
        levelProgLevel="NNLP-3",
        assessmentScore=score,
        assessmentToken=token,
    )


class LevelCalculatorTests(unittest.TestCase):
    def test_mastered_token_uses_achieved_threshold(self) -> None:
        result = calculate_level(_request("mastered"), SCALE)
        self.assertEqual(result.achievement, "mastered")
        self.assertEqual(result.progressionLevel, "NNLP-3")
        self.assertEqual(result.scaledScore, 450)

    def test_fully_mastered_token_is_mastered(self) -> None:
        result = calculate_level(_request("fully mastered"), SCALE)
        self.assertEqual(result.achievement, ACHIEVEMENT_MASTERED)
        self.assertEqual(result.scaledScore, SCALE.achieved)

    def test_partial_tokens_use_partially_achieved_threshold(self) -> None:
        for token in ("intermittent", "partial", "satisfied"):
            with self.subTest(token=token):
                result = calculate_level(_request(token), SCALE)
                self.assertEqual(result.achievement, "partially achieved")
                self.assertEqual(result.scaledScore, 380)

    def test_unknown_and_empty_tokens_fall_back_to_partial(self) -> None:
        for token in ("B+", "", None, "Mastered", "excellent"):
            with self.subTest(token=token):
                result = calculate_level(_request(token), SCALE)
                self.assertEqual(result.achievement, ACHIEVEMENT_PARTIAL)
                self.assertEqual(result.scaledScore, SCALE.partiallyAchieved)

    def test_mapped_method_behaves_like_prescribed(self) -> None:
        prescribed = calculate_level(_request("mastered", method="prescribed"), SCALE)
        mapped = calculate_level(_request("mastered", method="mapped"), SCALE)
        self.assertEqual(prescribed, mapped)

    def test_assessment_score_does_not_change_classification(self) -> None:
        low = calculate_level(_request("partial", score=1), SCALE)
        high = calculate_level(_request("partial", score=10_000), SCALE)
        self.assertEqual(low, high)

    def test_unsupported_method_raises(self) -> None:
        with self.assertRaises(UnsupportedLevelMethodError) as ctx:
            calculate_level(_request("mastered", method="inferred"), SCALE)
        self.assertIn("inferred", str(ctx.exception))
        self.assertIsInstance(ctx.exception, ValueError)

    def test_ensure_supported_method_accepts_known_tags(self) -> None:
        ensure_supported_method("prescribed")
        ensure_supported_method("mapped")
        with self.assertRaises(UnsupportedLevelMethodError):
            ensure_supported_method("Prescribed")

    def test_classify_assessment_token(self) -> None:
        self.assertEqual(classify_assessment_token("mastered"), ACHIEVEMENT_MASTERED)
        self.assertEqual(classify_assessment_token("satisfied"), ACHIEVEMENT_PARTIAL)
        self.assertEqual(classify_assessment_token(None), ACHIEVEMENT_PARTIAL)


if __name__ == "__main__":
    unittest.main()
