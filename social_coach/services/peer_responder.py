"""
練習相手の応答（定型文）
会話中の相手役は実際の対話生成を行わず、定型文から選んで返す。
本当の分析はセッション終了後にFeedbackServiceが行う
"""
import random
from typing import List

from social_coach.models.schemas import Scenario

CANNED_REPLIES: List[str] = [
    "That's interesting, tell me more.",
    "I see. And then?",
    "Okay, what do you think?",
    "Got it.",
    "Right.",
]


class PeerResponder:
    """相手役の定型応答を選ぶクラス"""

    def __init__(self, rng: random.Random | None = None) -> None:
        """
        Args:
            rng: 乱数生成器（テストでは固定シードを渡す）
        """
        self.rng: random.Random = rng or random.Random()

    def opening_line(self, scenario: Scenario) -> str:
        """セッション開始時の最初のメッセージ"""
        return f"Hi there! Let's practice the \"{scenario.title}\" scenario. I'm ready when you are."

    def reply(self, user_text: str) -> str | None:
        """ユーザーの発言に対する応答（空の発言にはNone）"""
        if not user_text.strip():
            return None
        return self.rng.choice(CANNED_REPLIES)
