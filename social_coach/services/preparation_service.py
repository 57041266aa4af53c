"""
フレーズ練習サービス
会話を始める前に、ユーザーが考えたフレーズを1つの目標に照らして評価する
"""
import logging

from social_coach.errors import ReasoningConnectionError, ReasoningServiceError
from social_coach.models.schemas import (
    PreparationFeedback,
    PreparationOutcome,
    Scenario,
    ScenarioGoal,
)
from social_coach.services.assessment_validator import (
    PREPARATION_CONNECTION_FALLBACK,
    PREPARATION_FALLBACK,
    AssessmentValidator,
)
from social_coach.services.reasoning_client import ReasoningClient
from social_coach.services.request_builder import (
    PREPARATION_SYSTEM_PROMPT,
    AssessmentRequestBuilder,
)

logger = logging.getLogger(__name__)


def first_goal(scenario: Scenario) -> ScenarioGoal:
    """フレーズ練習の対象となる最初の目標"""
    return scenario.goals[0]


def _fallback(template: PreparationFeedback, error: str) -> PreparationOutcome:
    return PreparationOutcome(feedback=template.model_copy(), is_fallback=True, error=error)


class PreparationAdvisor:
    """フレーズ練習の評価を行うサービスクラス"""

    def __init__(self, client: ReasoningClient | None = None) -> None:
        """
        初期化処理
        APIキーが設定されていない場合、clientはNoneになり評価は常に代替データを返す
        """
        if client is None:
            try:
                client = ReasoningClient()
            except ValueError as e:
                logger.warning("推論サービスが設定されていません。フレーズ練習は代替データになります: %s", e)
        self.client: ReasoningClient | None = client
        self.builder: AssessmentRequestBuilder = AssessmentRequestBuilder()
        self.validator: AssessmentValidator = AssessmentValidator()

    async def evaluate(self, phrase: str, goal: ScenarioGoal) -> PreparationOutcome:
        """
        フレーズが目標の達成に効果的かを評価

        失敗しても例外は送出せず、代替データ（is_fallback=True）を返す

        Args:
            phrase: ユーザーが考えたフレーズ
            goal: 対象の目標

        Returns:
            評価結果
        """
        if not phrase.strip():
            return _fallback(PREPARATION_FALLBACK, "フレーズが空です")
        if self.client is None:
            return _fallback(PREPARATION_FALLBACK, "推論サービスが設定されていません")

        try:
            raw_text: str = await self.client.complete_json(
                PREPARATION_SYSTEM_PROMPT,
                self.builder.render_preparation_prompt(phrase, goal),
            )
        except ReasoningConnectionError as e:
            logger.warning("フレーズ練習で接続エラーが発生しました: %s", e)
            return _fallback(PREPARATION_CONNECTION_FALLBACK, str(e))
        except ReasoningServiceError as e:
            logger.warning("フレーズ練習でエラーが発生しました: %s", e)
            return _fallback(PREPARATION_FALLBACK, str(e))

        feedback: PreparationFeedback | None = self.validator.parse_preparation(raw_text)
        if feedback is None:
            return _fallback(PREPARATION_FALLBACK, "JSON解析エラー")
        return PreparationOutcome(feedback=feedback)
