"""
進捗集計サービス
保存された履歴からスキル習熟度・スコア推移・統計を計算する（履歴は変更しない）
"""
import math
from typing import Dict, Iterable, List, Mapping, Sequence, Set

from social_coach.data.scenarios import SKILL_CATEGORIES
from social_coach.models.schemas import (
    DashboardView,
    Feedback,
    PerformancePoint,
    ProgressData,
    Scenario,
    SkillCategory,
    SkillProficiency,
    SummaryStats,
)

# 発言記録がない場合の「最も練習したシナリオ」
NO_SCENARIO = "none"


def round_half_up(value: float) -> int:
    """0.5を切り上げる四捨五入（組み込みのroundは偶数丸め）"""
    return int(math.floor(value + 0.5))


def proficiency_by_category(
    history: Sequence[Feedback], scenarios: Iterable[Scenario]
) -> Dict[SkillCategory, int]:
    """
    スキルカテゴリごとの習熟度（%）を計算

    達成済みの目標は、履歴のシナリオIDで引いたシナリオの目標とだけ照合する。
    同じ目標を複数回達成しても1回として数える

    Args:
        history: フィードバック履歴
        scenarios: シナリオ一覧

    Returns:
        カテゴリ -> 習熟度（0-100）
    """
    scenario_list: List[Scenario] = list(scenarios)
    by_id: Dict[str, Scenario] = {scenario.id: scenario for scenario in scenario_list}

    achieved: Dict[SkillCategory, Set[str]] = {category: set() for category in SKILL_CATEGORIES}
    for feedback in history:
        scenario = by_id.get(feedback.scenario_id)
        if scenario is None:
            continue
        goals_by_id = {goal.id: goal for goal in scenario.goals}
        for goal_id in feedback.achieved_goals:
            goal = goals_by_id.get(goal_id) if isinstance(goal_id, str) else None
            if goal is not None:
                achieved[goal.category].add(goal.id)

    result: Dict[SkillCategory, int] = {}
    for category in SKILL_CATEGORIES:
        total: int = sum(
            1 for scenario in scenario_list for goal in scenario.goals if goal.category == category
        )
        result[category] = round_half_up(100 * len(achieved[category]) / total) if total > 0 else 0
    return result


def performance_timeline(history: Sequence[Feedback]) -> List[PerformancePoint]:
    """
    スコア推移を古い順に並べる

    履歴は新しい順で保存されているため、逆順にしてから1始まりの番号を振る
    """
    return [
        PerformancePoint(
            session_index=index,
            score=feedback.performance_score,
            scenario_label=feedback.scenario_title.split(" ")[0],
        )
        for index, feedback in enumerate(reversed(history), start=1)
    ]


def summary_stats(history: Sequence[Feedback], interactions: Mapping[str, int]) -> SummaryStats:
    """セッション数、平均スコア、最も練習したシナリオ"""
    total_sessions: int = len(history)
    average_score: int = 0
    if total_sessions:
        average_score = round_half_up(
            sum(feedback.performance_score for feedback in history) / total_sessions
        )

    most_practiced: str = NO_SCENARIO
    if interactions:
        # 同数の場合は先に記録されたシナリオ
        most_practiced = max(interactions, key=lambda scenario_id: interactions[scenario_id])

    return SummaryStats(
        total_sessions=total_sessions,
        average_score=average_score,
        most_practiced_scenario_id=most_practiced,
    )


class MetricsEngine:
    """ダッシュボード用の集計を行うサービスクラス"""

    def __init__(self, scenarios: Iterable[Scenario]) -> None:
        self.scenarios: List[Scenario] = list(scenarios)

    def build_dashboard(self, progress: ProgressData) -> DashboardView:
        """
        進捗データからダッシュボード表示用のデータを作成

        Args:
            progress: 進捗データ

        Returns:
            ダッシュボードデータ
        """
        history = progress.feedback_history
        proficiency = proficiency_by_category(history, self.scenarios)
        return DashboardView(
            has_data=len(history) > 0,
            stats=summary_stats(history, progress.interactions),
            skills=[
                SkillProficiency(skill=category, proficiency=proficiency[category])
                for category in SKILL_CATEGORIES
            ],
            timeline=performance_timeline(history),
            recent_feedback=list(history),
        )
