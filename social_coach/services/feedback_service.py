"""
フィードバックサービス
会話ログを推論サービスで分析し、検証済みのフィードバックを作成する
"""
import logging
from datetime import datetime, timezone
from typing import List

from social_coach.errors import ReasoningConnectionError, ReasoningServiceError
from social_coach.models.schemas import (
    AnalysisRequest,
    AssessmentOutcome,
    AssessmentResult,
    Feedback,
    Scenario,
    TranscriptMessage,
)
from social_coach.services.assessment_validator import (
    ANALYSIS_FALLBACK,
    CONNECTION_FALLBACK,
    AssessmentValidator,
)
from social_coach.services.reasoning_client import ReasoningClient
from social_coach.services.request_builder import ANALYSIS_SYSTEM_PROMPT, AssessmentRequestBuilder

logger = logging.getLogger(__name__)


def _fallback(template: AssessmentResult, error: str) -> AssessmentOutcome:
    return AssessmentOutcome(
        assessment=template.model_copy(deep=True),
        is_fallback=True,
        error=error,
    )


class FeedbackService:
    """会話分析を実行するサービスクラス"""

    def __init__(self, client: ReasoningClient | None = None) -> None:
        """
        初期化処理
        clientを省略した場合は環境変数からReasoningClientを作成する
        APIキーが設定されていない場合、clientはNoneになり分析は常に代替データを返す
        """
        if client is None:
            try:
                client = ReasoningClient()
            except ValueError as e:
                logger.warning("推論サービスが設定されていません。フィードバックは代替データになります: %s", e)
        self.client: ReasoningClient | None = client
        self.builder: AssessmentRequestBuilder = AssessmentRequestBuilder()
        self.validator: AssessmentValidator = AssessmentValidator()

    async def analyze_session(
        self, transcript: List[TranscriptMessage], scenario: Scenario
    ) -> AssessmentOutcome:
        """
        会話ログを分析して評価結果を取得

        失敗しても例外は送出せず、代替データ（is_fallback=True）を返す

        Args:
            transcript: 会話ログ
            scenario: 練習シナリオ

        Returns:
            分析結果
        """
        request: AnalysisRequest = self.builder.build(transcript, scenario)
        if self.client is None:
            return _fallback(ANALYSIS_FALLBACK, "推論サービスが設定されていません")

        try:
            raw_text: str = await self.client.complete_json(
                ANALYSIS_SYSTEM_PROMPT, self.builder.render_prompt(request)
            )
        except ReasoningConnectionError as e:
            logger.warning("会話分析で接続エラーが発生しました: %s", e)
            return _fallback(CONNECTION_FALLBACK, str(e))
        except ReasoningServiceError as e:
            logger.warning("会話分析でエラーが発生しました: %s", e)
            return _fallback(ANALYSIS_FALLBACK, str(e))

        assessment: AssessmentResult | None = self.validator.validate(raw_text)
        if assessment is None:
            return _fallback(ANALYSIS_FALLBACK, "JSON解析エラー")

        logger.info(
            "会話分析が完了しました: scenario=%s score=%s achieved=%s",
            scenario.id,
            assessment.performance_score,
            assessment.achieved_goals,
        )
        return AssessmentOutcome(assessment=assessment)

    def build_feedback(
        self,
        assessment: AssessmentResult,
        scenario: Scenario,
        timestamp: datetime | None = None,
    ) -> Feedback:
        """
        評価結果にシナリオ情報を加えて保存用のフィードバックを作成

        Args:
            assessment: 検証済みの評価結果
            scenario: 練習シナリオ
            timestamp: 評価日時（省略時は現在時刻UTC）

        Returns:
            フィードバック
        """
        moment: datetime = timestamp or datetime.now(timezone.utc)
        return Feedback(
            **assessment.model_dump(),
            scenario_id=scenario.id,
            scenario_title=scenario.title,
            total_goals=len(scenario.goals),
            timestamp=moment.isoformat(),
        )
