"""
データモデル（スキーマ定義）
"""

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

SkillCategory = Literal["Initiation", "Reciprocity", "Collaboration", "Assertion"]
Sender = Literal["user", "peer"]


class ScenarioGoal(BaseModel):
    """シナリオの目標のデータモデル"""

    model_config = ConfigDict(frozen=True)

    id: str  # シナリオ内で一意な目標ID
    description: str  # 目標の説明
    hint: str = ""  # 練習時のヒント
    category: SkillCategory  # スキルカテゴリ


class Scenario(BaseModel):
    """練習シナリオのデータモデル"""

    model_config = ConfigDict(frozen=True)

    id: str  # 全体で一意なシナリオID
    title: str
    description: str = ""
    emoji: str = ""
    system_prompt: str  # 相手役の設定（分析時の文脈）
    goals: List[ScenarioGoal] = Field(min_length=1)  # 順序付きの目標リスト


class TranscriptMessage(BaseModel):
    """会話ログの1メッセージ"""

    sender: Sender
    text: str


class GoalSummary(BaseModel):
    """分析リクエストに含める目標"""

    id: str
    description: str


class TranscriptLine(BaseModel):
    """話者ラベル付きの会話行"""

    speaker: str
    text: str


class AnalysisRequest(BaseModel):
    """推論サービスへ渡す会話分析リクエスト"""

    scenario_title: str
    prompt_context: str  # シナリオの設定文
    goals: List[GoalSummary]
    lines: List[TranscriptLine]


class AssessmentResult(BaseModel):
    """検証済みの評価結果のデータモデル"""

    # inf/nanはJSONに保存できないため受け付けない
    model_config = ConfigDict(allow_inf_nan=False)

    positive_points: List[Any] = []  # 良かった点
    areas_for_practice: List[Any] = []  # 練習すべき点
    achieved_goals: List[Any] = []  # 達成した目標IDのリスト（重複はそのまま）
    emotional_tone_analysis: str = "Could not analyze emotional tone."  # 感情トーン分析
    performance_score: int | float = 50  # 0-100（範囲は検証しない）
    dynamic_difficulty_suggestion: str = "Keep up the great work!"  # 次回への提案


class AssessmentOutcome(BaseModel):
    """会話分析の結果（フォールバックかどうかを含む）"""

    assessment: AssessmentResult
    is_fallback: bool = False  # 失敗時の代替データならTrue
    error: str | None = None


class Feedback(AssessmentResult):
    """保存されるフィードバックのデータモデル"""

    scenario_id: str
    scenario_title: str
    total_goals: int  # シナリオの目標数
    timestamp: str  # ISO-8601形式の日時


class ProgressData(BaseModel):
    """進捗データ（永続化される集約）"""

    version: int = 1  # 保存形式のバージョン
    interactions: Dict[str, int] = {}  # シナリオIDごとのユーザー発言数
    feedback_history: List[Feedback] = []  # 新しい順


class PreparationFeedback(BaseModel):
    """フレーズ練習の評価結果"""

    is_effective: bool
    suggestion: str


class PreparationOutcome(BaseModel):
    """フレーズ練習の結果（フォールバックかどうかを含む）"""

    feedback: PreparationFeedback
    is_fallback: bool = False
    error: str | None = None


class PerformancePoint(BaseModel):
    """スコア推移グラフの1点"""

    session_index: int  # 1始まり、古い順
    score: int | float
    scenario_label: str


class SummaryStats(BaseModel):
    """全体の統計"""

    total_sessions: int
    average_score: int
    most_practiced_scenario_id: str


class SkillProficiency(BaseModel):
    """スキルカテゴリごとの習熟度"""

    skill: SkillCategory
    proficiency: int  # 0-100


class DashboardView(BaseModel):
    """ダッシュボード表示用の集計データ"""

    has_data: bool
    stats: SummaryStats
    skills: List[SkillProficiency]
    timeline: List[PerformancePoint]
    recent_feedback: List[Feedback]
