"""
練習セッション統合サービス
シナリオ選択後のフレーズ練習、会話、分析、進捗保存、ダッシュボード集計をまとめて扱う
"""
import logging
from typing import List

from social_coach.data.scenarios import SCENARIOS
from social_coach.models.schemas import (
    AssessmentOutcome,
    DashboardView,
    Feedback,
    PreparationOutcome,
    ProgressData,
    Scenario,
    TranscriptMessage,
)
from social_coach.services.feedback_service import FeedbackService
from social_coach.services.metrics_service import MetricsEngine
from social_coach.services.peer_responder import PeerResponder
from social_coach.services.preparation_service import PreparationAdvisor, first_goal
from social_coach.services.progress_store import ProgressStore

logger = logging.getLogger(__name__)


def count_user_messages(transcript: List[TranscriptMessage]) -> int:
    """会話ログ中のユーザー発言数"""
    return sum(1 for message in transcript if message.sender == "user")


class PracticeCoach:
    """練習セッションを統合的に実行するサービスクラス

    進捗データは渡されたProgressStoreを通してのみ読み書きする
    """

    def __init__(
        self,
        store: ProgressStore,
        feedback_service: FeedbackService | None = None,
        preparation_advisor: PreparationAdvisor | None = None,
        peer: PeerResponder | None = None,
        scenarios: List[Scenario] | None = None,
    ) -> None:
        """
        初期化処理

        Args:
            store: 進捗データの保存先
            feedback_service: 会話分析サービス（省略時は環境変数から作成）
            preparation_advisor: フレーズ練習サービス（省略時は環境変数から作成）
            peer: 相手役の応答
            scenarios: シナリオ一覧（省略時は組み込みのシナリオ）
        """
        self.store: ProgressStore = store
        self.feedback_service: FeedbackService = feedback_service or FeedbackService()
        self.preparation_advisor: PreparationAdvisor = (
            preparation_advisor or PreparationAdvisor(self.feedback_service.client)
        )
        self.peer: PeerResponder = peer or PeerResponder()
        self.metrics: MetricsEngine = MetricsEngine(scenarios if scenarios is not None else SCENARIOS)

    async def rehearse(self, phrase: str, scenario: Scenario) -> PreparationOutcome:
        """シナリオの最初の目標に対してフレーズを評価"""
        return await self.preparation_advisor.evaluate(phrase, first_goal(scenario))

    def start_session(self, scenario: Scenario) -> List[TranscriptMessage]:
        """相手役の最初のメッセージだけを含む会話ログを作成"""
        return [TranscriptMessage(sender="peer", text=self.peer.opening_line(scenario))]

    def send_message(
        self, transcript: List[TranscriptMessage], text: str
    ) -> List[TranscriptMessage]:
        """
        ユーザーの発言と相手役の応答を追加した会話ログを返す

        空の発言は無視して元の会話ログを返す
        """
        reply: str | None = self.peer.reply(text)
        if reply is None:
            return transcript
        return [
            *transcript,
            TranscriptMessage(sender="user", text=text),
            TranscriptMessage(sender="peer", text=reply),
        ]

    async def finish_session(
        self, transcript: List[TranscriptMessage], scenario: Scenario
    ) -> Feedback:
        """
        セッションを終了し、分析結果を進捗データに追加

        Args:
            transcript: 会話ログ
            scenario: 練習シナリオ

        Returns:
            保存したフィードバック
        """
        outcome: AssessmentOutcome = await self.feedback_service.analyze_session(
            transcript, scenario
        )
        if outcome.is_fallback:
            logger.warning("代替フィードバックを保存します: %s", outcome.error)

        feedback: Feedback = self.feedback_service.build_feedback(outcome.assessment, scenario)
        self.store.append(feedback, count_user_messages(transcript), scenario.id)
        return feedback

    def progress(self) -> ProgressData:
        """現在の進捗データ"""
        return self.store.load()

    def dashboard(self) -> DashboardView:
        """ダッシュボード表示用のデータ"""
        return self.metrics.build_dashboard(self.store.load())

    def reset_progress(self, confirmed: bool) -> ProgressData:
        """
        進捗データをリセットする（元に戻せない）

        Args:
            confirmed: ユーザーが確認済みの場合のみTrue

        Returns:
            リセット後（未確認の場合は現在）の進捗データ
        """
        if not confirmed:
            return self.store.load()
        return self.store.reset()
