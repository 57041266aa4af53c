"""
MetricsEngineのテスト
"""
import pytest

from social_coach.data.scenarios import SCENARIOS, SKILL_CATEGORIES
from social_coach.models.schemas import Feedback, ProgressData, Scenario, ScenarioGoal
from social_coach.services.metrics_service import (
    NO_SCENARIO,
    MetricsEngine,
    performance_timeline,
    proficiency_by_category,
    round_half_up,
    summary_stats,
)

SCENARIO_TITLES = {scenario.id: scenario.title for scenario in SCENARIOS}


def make_feedback(scenario_id, achieved=None, score=50):
    """テスト用のフィードバックを作成"""
    return Feedback(
        scenario_id=scenario_id,
        scenario_title=SCENARIO_TITLES.get(scenario_id, "Unknown Scenario"),
        total_goals=3,
        timestamp="2026-10-19T12:00:00+00:00",
        achieved_goals=achieved or [],
        performance_score=score,
    )


class TestRoundHalfUp:
    """四捨五入のテストクラス"""

    @pytest.mark.parametrize(
        "value, expected",
        [(12.5, 13), (2.5, 3), (66.666, 67), (33.333, 33), (0.0, 0), (-2.5, -2), (99.5, 100)],
    )
    def test_round_half_up(self, value, expected):
        """0.5は切り上げる"""
        assert round_half_up(value) == expected


class TestProficiencyByCategory:
    """スキル習熟度のテストクラス"""

    def test_empty_history(self):
        """履歴がなければ全カテゴリ0"""
        result = proficiency_by_category([], SCENARIOS)

        assert result == {category: 0 for category in SKILL_CATEGORIES}

    def test_counts_distinct_goals(self):
        """同じ目標を複数回達成しても1回として数える"""
        history = [
            make_feedback("cafeteria", ["ask_to_join"]),
            make_feedback("cafeteria", ["ask_to_join", "ask_to_join"]),
        ]

        result = proficiency_by_category(history, SCENARIOS)

        # Initiation: 4シナリオに1つずつ
        assert result["Initiation"] == 25
        assert result["Reciprocity"] == 0

    def test_counts_per_category(self):
        """カテゴリごとの割合"""
        history = [
            make_feedback("cafeteria", ["ask_question", "share_interest"]),
            make_feedback("hallway", ["thank_person", "ask_for_directions"]),
            make_feedback("classroom", ["share_an_idea", "ask_for_opinion"]),
        ]

        result = proficiency_by_category(history, SCENARIOS)

        # Reciprocity: 全4目標中3つ
        assert result["Reciprocity"] == 75
        # Assertion: 全2目標中1つ
        assert result["Assertion"] == 50
        # Collaboration: 全2目標中2つ
        assert result["Collaboration"] == 100
        assert result["Initiation"] == 0

    def test_goal_under_wrong_scenario_is_ignored(self):
        """別のシナリオの目標IDは数えない"""
        history = [make_feedback("hallway", ["ask_to_join", "share_an_idea"])]

        result = proficiency_by_category(history, SCENARIOS)

        assert result["Initiation"] == 0
        assert result["Collaboration"] == 0

    def test_unknown_scenario_and_ids_are_ignored(self):
        """不明なシナリオや文字列でないIDは無視"""
        history = [
            make_feedback("space_station", ["ask_to_join"]),
            make_feedback("cafeteria", [3, None, "made_up"]),
        ]

        result = proficiency_by_category(history, SCENARIOS)

        assert all(value == 0 for value in result.values())

    def test_category_without_goals_is_zero(self):
        """目標が存在しないカテゴリは0"""
        only = Scenario(
            id="solo",
            title="Solo Practice",
            system_prompt="",
            goals=[ScenarioGoal(id="hello", description="Say hello.", category="Initiation")],
        )
        history = [make_feedback("solo", ["hello"])]

        result = proficiency_by_category(history, [only])

        assert result == {"Initiation": 100, "Reciprocity": 0, "Collaboration": 0, "Assertion": 0}

    def test_bounds(self):
        """すべての目標を達成しても100を超えない"""
        history = [make_feedback(s.id, [g.id for g in s.goals]) for s in SCENARIOS] * 3

        result = proficiency_by_category(history, SCENARIOS)

        assert all(0 <= value <= 100 for value in result.values())
        assert result == {category: 100 for category in SKILL_CATEGORIES}


class TestPerformanceTimeline:
    """スコア推移のテストクラス"""

    def test_empty(self):
        """履歴がなければ空"""
        assert performance_timeline([]) == []

    def test_chronological_order(self):
        """新しい順の履歴を古い順に並べ替える"""
        history = [
            make_feedback("classroom", score=90),
            make_feedback("hallway", score=70),
            make_feedback("cafeteria", score=40),
        ]

        timeline = performance_timeline(history)

        assert [point.session_index for point in timeline] == [1, 2, 3]
        assert [point.score for point in timeline] == [40, 70, 90]
        assert [point.scenario_label for point in timeline] == ["Cafeteria", "First", "Group"]
        n = len(history)
        for point in timeline:
            assert point.score == history[n - point.session_index].performance_score

    def test_label_splits_on_single_space(self):
        """ラベルはタイトルを半角スペースで区切った最初の要素"""
        history = [
            make_feedback("cafeteria").model_copy(update={"scenario_title": " Leading Space"}),
            make_feedback("cafeteria").model_copy(update={"scenario_title": "Tab\tSeparated Title"}),
            make_feedback("cafeteria").model_copy(update={"scenario_title": ""}),
        ]

        timeline = performance_timeline(history)

        assert [point.scenario_label for point in timeline] == ["", "Tab\tSeparated", ""]

    def test_does_not_mutate_history(self):
        """履歴を変更しない"""
        history = [make_feedback("classroom", score=90), make_feedback("hallway", score=70)]

        performance_timeline(history)

        assert [fb.performance_score for fb in history] == [90, 70]


class TestSummaryStats:
    """統計のテストクラス"""

    def test_empty(self):
        """履歴がなければ0と"none" """
        stats = summary_stats([], {})

        assert stats.total_sessions == 0
        assert stats.average_score == 0
        assert stats.most_practiced_scenario_id == NO_SCENARIO

    def test_average_is_rounded_half_up(self):
        """平均スコアは四捨五入"""
        history = [make_feedback("cafeteria", score=82), make_feedback("cafeteria", score=83)]

        stats = summary_stats(history, {"cafeteria": 4})

        assert stats.total_sessions == 2
        assert stats.average_score == 83

    def test_most_practiced(self):
        """発言数が最も多いシナリオ"""
        stats = summary_stats([], {"cafeteria": 2, "hallway": 7, "classroom": 3})

        assert stats.most_practiced_scenario_id == "hallway"

    def test_most_practiced_tie_keeps_first(self):
        """同数の場合は先に記録されたシナリオ"""
        stats = summary_stats([], {"playground": 5, "cafeteria": 5})

        assert stats.most_practiced_scenario_id == "playground"


class TestMetricsEngine:
    """MetricsEngineのテストクラス"""

    def test_build_dashboard_empty(self):
        """空の進捗データ"""
        dashboard = MetricsEngine(SCENARIOS).build_dashboard(ProgressData())

        assert dashboard.has_data is False
        assert [skill.skill for skill in dashboard.skills] == list(SKILL_CATEGORIES)
        assert dashboard.timeline == []
        assert dashboard.stats.most_practiced_scenario_id == NO_SCENARIO

    def test_build_dashboard(self):
        """進捗データからダッシュボードを作成（元データは変更しない）"""
        progress = ProgressData(
            interactions={"cafeteria": 3},
            feedback_history=[make_feedback("cafeteria", ["ask_to_join"], score=80)],
        )
        before = progress.model_copy(deep=True)

        dashboard = MetricsEngine(SCENARIOS).build_dashboard(progress)

        assert dashboard.has_data is True
        assert dashboard.stats.average_score == 80
        assert dashboard.stats.most_practiced_scenario_id == "cafeteria"
        assert dashboard.skills[0].skill == "Initiation"
        assert dashboard.skills[0].proficiency == 25
        assert dashboard.timeline[0].session_index == 1
        assert dashboard.recent_feedback == progress.feedback_history
        assert progress == before
