"""
評価結果検証サービス
推論サービスの応答（信頼できない入力）を型の保証された評価結果に正規化する
"""
import json
import logging
import math
import re
from typing import Any, Dict

from social_coach.models.schemas import AssessmentResult, PreparationFeedback

logger = logging.getLogger(__name__)

# 応答全体を囲むコードフェンス（言語タグは任意）
_FENCE_PATTERN = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)

DEFAULT_TONE_ANALYSIS = "Could not analyze emotional tone."
DEFAULT_SCORE = 50
DEFAULT_SUGGESTION = "Keep up the great work!"

# 解析できなかった場合の代替データ
ANALYSIS_FALLBACK = AssessmentResult(
    positive_points=["Great job completing the scenario!"],
    areas_for_practice=["There was an issue generating detailed feedback."],
    achieved_goals=[],
    emotional_tone_analysis="Analysis not available.",
    performance_score=50,
    dynamic_difficulty_suggestion="Keep practicing!",
)

# 推論サービスに接続できなかった場合の代替データ
CONNECTION_FALLBACK = AssessmentResult(
    positive_points=["Great job completing the scenario!"],
    areas_for_practice=["There was an issue connecting to the AI coach for detailed feedback."],
    achieved_goals=[],
    emotional_tone_analysis="Analysis not available due to a connection issue.",
    performance_score=50,
    dynamic_difficulty_suggestion="Keep practicing!",
)

PREPARATION_FALLBACK = PreparationFeedback(
    is_effective=False,
    suggestion="Couldn't analyze that phrase. Let's just try the interaction.",
)

PREPARATION_CONNECTION_FALLBACK = PreparationFeedback(
    is_effective=False,
    suggestion="Sorry, couldn't connect to the coach. Let's just try the interaction!",
)


def strip_code_fence(text: str) -> str:
    """
    応答全体が```json ... ```のように囲まれていれば中身を取り出す

    Args:
        text: 推論サービスの生の応答

    Returns:
        フェンスを除いたテキスト
    """
    stripped: str = text.strip()
    match = _FENCE_PATTERN.match(stripped)
    if match and match.group(2):
        return match.group(2).strip()
    return stripped


def _reject_constant(name: str) -> Any:
    # NaN / Infinity は厳密なJSONではない
    raise ValueError(f"invalid JSON constant: {name}")


def parse_json_object(text: str) -> Dict[str, Any] | None:
    """
    フェンスを除去してJSONオブジェクトとして解析する

    Returns:
        解析結果の辞書、解析できない場合やnullの場合はNone
        オブジェクト以外（配列や数値など）は空の辞書として扱い、各フィールドをデフォルトにする
    """
    try:
        data: Any = json.loads(strip_code_fence(text), parse_constant=_reject_constant)
    except ValueError as e:
        logger.warning("推論サービスの応答をJSONとして解析できません: %s", e)
        return None
    if data is None:
        logger.warning("推論サービスの応答がnullです")
        return None
    if not isinstance(data, dict):
        logger.warning("推論サービスの応答がJSONオブジェクトではありません: %s", type(data).__name__)
        return {}
    return data


def _is_number(value: Any) -> bool:
    # boolはintのサブクラスだが数値として扱わない。floatに収まらない値(1e400など)も除く
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def coerce_assessment(data: Dict[str, Any]) -> AssessmentResult:
    """
    フィールドごとに型を確認し、不正な値はデフォルトに置き換える

    範囲の補正、配列要素の整形、重複除去は行わない

    Args:
        data: 解析済みの応答

    Returns:
        検証済みの評価結果
    """
    positive_points = data.get("positive_points")
    areas_for_practice = data.get("areas_for_practice")
    achieved_goals = data.get("achieved_goals")
    tone = data.get("emotional_tone_analysis")
    score = data.get("performance_score")
    suggestion = data.get("dynamic_difficulty_suggestion")

    return AssessmentResult(
        positive_points=positive_points if isinstance(positive_points, list) else [],
        areas_for_practice=areas_for_practice if isinstance(areas_for_practice, list) else [],
        achieved_goals=achieved_goals if isinstance(achieved_goals, list) else [],
        emotional_tone_analysis=tone if isinstance(tone, str) else DEFAULT_TONE_ANALYSIS,
        performance_score=score if _is_number(score) else DEFAULT_SCORE,
        dynamic_difficulty_suggestion=(
            suggestion if isinstance(suggestion, str) else DEFAULT_SUGGESTION
        ),
    )


class AssessmentValidator:
    """推論サービスの応答を検証するクラス"""

    def validate(self, raw_text: str) -> AssessmentResult | None:
        """
        会話分析の応答を検証する

        Args:
            raw_text: 推論サービスの生の応答

        Returns:
            検証済みの評価結果。JSONとして解析できない場合はNone
            （呼び出し側でANALYSIS_FALLBACKに置き換える）
        """
        data = parse_json_object(raw_text)
        if data is None:
            return None
        return coerce_assessment(data)

    def validate_or_fallback(self, raw_text: str) -> AssessmentResult:
        """検証し、解析できなければ代替データを返す"""
        result = self.validate(raw_text)
        if result is None:
            return ANALYSIS_FALLBACK.model_copy(deep=True)
        return result

    def parse_preparation(self, raw_text: str) -> PreparationFeedback | None:
        """
        フレーズ練習の応答を検証する

        Returns:
            is_effectiveが真偽値、suggestionが文字列の場合のみ結果を返す。それ以外はNone
        """
        data = parse_json_object(raw_text)
        if data is None:
            return None
        is_effective = data.get("is_effective")
        suggestion = data.get("suggestion")
        if not isinstance(is_effective, bool) or not isinstance(suggestion, str):
            logger.warning("フレーズ練習の応答の形式が不正です: %s", data)
            return None
        return PreparationFeedback(is_effective=is_effective, suggestion=suggestion)
