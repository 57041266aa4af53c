"""
分析リクエスト生成サービス
会話ログとシナリオから推論サービスへ渡すリクエストとプロンプトを組み立てる
"""
import json
from typing import Dict, List

from social_coach.models.schemas import (
    AnalysisRequest,
    GoalSummary,
    Scenario,
    ScenarioGoal,
    TranscriptLine,
    TranscriptMessage,
)

# 話者ラベル
SPEAKER_LABELS: Dict[str, str] = {
    "user": "User",
    "peer": "AI Peer",
}

ANALYSIS_SYSTEM_PROMPT = (
    "You are a specialized AI assistant that analyzes social interactions "
    "and returns data ONLY in a valid JSON format."
)

PREPARATION_SYSTEM_PROMPT = (
    "You are a supportive social skills coach. Always respond in valid JSON format."
)


class AssessmentRequestBuilder:
    """会話分析リクエストを組み立てるクラス"""

    def build(
        self, transcript: List[TranscriptMessage], scenario: Scenario
    ) -> AnalysisRequest:
        """
        会話ログとシナリオから分析リクエストを作成

        Args:
            transcript: 会話ログ（空でもよい）
            scenario: 練習シナリオ（目標が1つ以上必要）

        Returns:
            分析リクエスト
        """
        if not scenario.goals:
            raise ValueError(f"シナリオ {scenario.id} に目標がありません")

        goals: List[GoalSummary] = [
            GoalSummary(id=goal.id, description=goal.description)
            for goal in scenario.goals
        ]
        lines: List[TranscriptLine] = [
            TranscriptLine(speaker=SPEAKER_LABELS[message.sender], text=message.text)
            for message in transcript
        ]
        return AnalysisRequest(
            scenario_title=scenario.title,
            prompt_context=scenario.system_prompt,
            goals=goals,
            lines=lines,
        )

    def render_prompt(self, request: AnalysisRequest) -> str:
        """
        分析リクエストを推論サービス向けのプロンプトに変換

        Args:
            request: 分析リクエスト

        Returns:
            プロンプト文字列
        """
        goals_json: str = json.dumps(
            [goal.model_dump() for goal in request.goals], indent=2, ensure_ascii=False
        )
        conversation: str = "\n".join(
            f"{line.speaker}: {line.text}" for line in request.lines
        )

        return f"""
        Your task is to analyze the following conversation and return a structured JSON object.

        **Scenario:** "{request.scenario_title}"
        **Scenario Setting (instructions given to the AI Peer):**
        {request.prompt_context}

        **User's Goals:**
        {goals_json}

        **Conversation Transcript:**
        {conversation}

        **Instructions:**
        Analyze the user's performance based ONLY on their messages in the transcript. Your entire response must be a single, valid JSON object, without any surrounding text, explanations, or markdown fences.

        **JSON Schema to follow:**
        {{
            "positive_points": ["string"],
            "areas_for_practice": ["string"],
            "achieved_goals": ["string"],
            "emotional_tone_analysis": "string",
            "performance_score": "number",
            "dynamic_difficulty_suggestion": "string"
        }}

        **Field Descriptions & Rules:**
        1. "positive_points": Array of strings. List specific, positive actions the user took. If none, return an empty array [].
        2. "areas_for_practice": Array of strings. List concrete, actionable suggestions for improvement. If none, return an empty array [].
        3. "achieved_goals": Array of goal 'id' strings that the user successfully accomplished. Be strict. Only include goals that were clearly met.
        4. "emotional_tone_analysis": A 1-2 sentence analysis of the user's textual emotional tone (e.g., confident, curious, hesitant). If unable to determine from the text, state that clearly.
        5. "performance_score": A single integer from 0 to 100 assessing overall performance. 50 is average. Base this on goal achievement and conversational fluency.
        6. "dynamic_difficulty_suggestion": A single, encouraging sentence for the user's next session.

        **Crucial Rule:** If the conversation is too short or doesn't provide enough information to analyze, you MUST still return a valid JSON object. Populate the fields with sensible defaults (e.g., empty arrays, a score of 50, a message like "Not enough data to analyze tone."). DO NOT break the JSON format or return an error.

        Your output MUST be ONLY the JSON object.
        """

    def render_preparation_prompt(self, phrase: str, goal: ScenarioGoal) -> str:
        """
        フレーズ練習用のプロンプトを作成

        Args:
            phrase: ユーザーが考えたフレーズ
            goal: 対象の目標

        Returns:
            プロンプト文字列
        """
        return f"""
        A user is practicing for a social interaction. Their goal is to "{goal.description}".
        The user has proposed the following phrase: "{phrase}"

        Analyze this phrase. Is it an effective way to achieve the goal?
        Provide your feedback in a JSON object with two keys:
        1. "is_effective": a boolean (true if the phrase is good, false if it could be improved).
        2. "suggestion": a single, concise sentence of feedback. If it's effective, be encouraging. If not, provide a constructive alternative or suggestion for improvement.

        Example 1:
        Goal: Ask to join a game.
        Phrase: "Can I play?"
        Response: {{"is_effective": true, "suggestion": "That's a great, direct way to ask!"}}

        Example 2:
        Goal: Ask to join a game.
        Phrase: "Your game is stupid."
        Response: {{"is_effective": false, "suggestion": "This might sound a bit negative. Try focusing on joining in, like 'Hey, mind if I join?'"}}

        Return ONLY the JSON object.
        """
