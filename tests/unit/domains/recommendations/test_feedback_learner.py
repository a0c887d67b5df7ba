"""피드백 기반 가중치 학습 단위 테스트"""

from datetime import timedelta

import pytest

from app.domains.behaviors.models import InteractionAction
from app.domains.contents.models import ContentType, TimeOfDay
from app.domains.recommendations.feedback.learner import (
    FeedbackWeightLearner,
    normalize,
)
from app.domains.recommendations.tuning import DEFAULT_TUNING
from app.domains.recommendations.types import PersonalizedWeights


@pytest.fixture
def learner():
    return FeedbackWeightLearner()


def test_normalize_uses_absolute_sum():
    """절대값 합 기준 정규화 (음수 유지)"""
    result = normalize({"a": 3.0, "b": -1.0})

    assert result == {"a": 0.75, "b": -0.25}
    assert sum(abs(v) for v in result.values()) == pytest.approx(1.0)


def test_normalize_zero_total():
    """합이 0이면 빈 결과"""
    assert normalize({"a": 0.0}) == {}
    assert normalize({}) == {}


def test_normalize_drops_zero_values():
    """값이 0인 키는 결과에서 제외"""
    result = normalize({"a": 2.0, "b": 0.0})

    assert result == {"a": 1.0}


class TestAnalyzeEngagementPatterns:
    """참여 패턴 분석 테스트"""

    def test_preferences_are_normalized(self, learner, make_content, make_event):
        """타입/태그 선호도는 절대값 합이 1"""
        # Given
        article = make_content(1, tags=["tea", "春季"])
        video = make_content(2, tags=["yoga"], content_type=ContentType.VIDEO)
        events = [
            make_event(1, InteractionAction.LIKE),
            make_event(1, InteractionAction.SAVE),
            make_event(2, InteractionAction.DISLIKE),
            make_event(2, InteractionAction.VIEW),
        ]

        # When
        patterns = learner.analyze_engagement_patterns(
            events, {1: article, 2: video}
        )

        # Then
        for pref in (
            patterns.content_type_preference,
            patterns.tag_preference,
            patterns.positive_feedback_tags,
            patterns.negative_feedback_tags,
        ):
            assert sum(abs(v) for v in pref.values()) == pytest.approx(1.0)
        assert patterns.content_type_preference["article"] > 0
        assert patterns.content_type_preference["video"] < 0
        assert patterns.seasonal_preference == {"spring": 1.0}
        assert patterns.action_distribution["like"] == 0.25
        assert patterns.time_of_day_distribution == {TimeOfDay.MORNING: 1.0}
        assert patterns.unique_content_count == 2
        assert patterns.total_events == 4

    def test_events_without_content_are_skipped(
        self, learner, make_content, make_event
    ):
        """참조 콘텐츠가 없는 행동은 집계에서 제외"""
        # Given
        events = [
            make_event(1, InteractionAction.LIKE),
            make_event(99, InteractionAction.LIKE),
        ]

        # When
        patterns = learner.analyze_engagement_patterns(
            events, {1: make_content(1, tags=["tea"])}
        )

        # Then
        assert patterns.tag_preference == {"tea": 1.0}
        assert patterns.unique_content_count == 1
        assert patterns.total_events == 2

    def test_offsetting_feedback_leaves_empty_preference(
        self, learner, make_content, make_event
    ):
        """같은 태그에 좋아요와 싫어요가 상쇄되면 선호도는 비어 있음"""
        # Given
        events = [
            make_event(1, InteractionAction.LIKE),
            make_event(1, InteractionAction.DISLIKE),
        ]

        # When
        patterns = learner.analyze_engagement_patterns(
            events, {1: make_content(1, tags=["tea"])}
        )

        # Then
        assert patterns.tag_preference == {}
        assert patterns.content_type_preference == {}
        assert patterns.positive_feedback_tags == {"tea": 1.0}
        assert patterns.negative_feedback_tags == {"tea": 1.0}

    def test_duration_and_completion_use_type_weights(
        self, learner, make_content, make_event
    ):
        """체류 시간/완료율은 콘텐츠 타입 가중치로 누적"""
        # Given
        video = make_content(1, content_type=ContentType.VIDEO)
        article = make_content(2)
        events = [
            make_event(1, duration=100.0, completion_rate=0.5),
            make_event(2, duration=100.0, completion_rate=0.5),
        ]

        # When
        patterns = learner.analyze_engagement_patterns(
            events, {1: video, 2: article}
        )

        # Then
        # video: 100 × 0.7 = 70, article: 100 × 0.1 = 10
        assert patterns.time_spent_preference["video"] == pytest.approx(70 / 80)
        # video: 0.5 × 0.3, article: 0.5 × 0.9
        assert patterns.completion_preference["article"] == pytest.approx(0.75)


class TestBuildWeights:
    """개인화 가중치 생성 테스트"""

    def test_returns_none_below_threshold(
        self, learner, make_content, make_event
    ):
        """행동이 20건 미만이면 개인화하지 않음"""
        events = [make_event(1) for _ in range(19)]

        assert learner.build(events, {1: make_content(1)}) is None

    def test_boost_and_avoid_tags(self, learner, make_content, make_event):
        """긍정 비중 20% 초과 태그는 부스트, 부정 비중 20% 초과 태그는 회피"""
        # Given
        tea = make_content(1, tags=["tea"])
        coffee = make_content(2, tags=["coffee"])
        events = [make_event(1, InteractionAction.LIKE) for _ in range(10)] + [
            make_event(2, InteractionAction.DISLIKE) for _ in range(10)
        ]

        # When
        weights = learner.build(events, {1: tea, 2: coffee})

        # Then
        assert weights is not None
        assert weights.boost_tags == frozenset({"tea"})
        assert weights.avoid_tags == frozenset({"coffee"})

    def test_preferred_time_of_day(self, learner, make_content, make_event, now):
        """가장 많은 시간대 비중이 30% 초과이면 선호 시간대로 지정"""
        # Given
        events = [make_event(1) for _ in range(15)] + [
            make_event(1, timestamp=now + timedelta(hours=10))
            for _ in range(5)
        ]

        # When
        weights = learner.build(events, {1: make_content(1)})

        # Then
        assert weights.preferred_time_of_day == TimeOfDay.MORNING

    @pytest.mark.parametrize(
        "unique_count,expected",
        [(20, 0.5), (10, 0.3), (2, 0.1)],
    )
    def test_diversity_weight_by_unique_ratio(
        self, learner, make_content, make_event, unique_count, expected
    ):
        """고유 콘텐츠 비율에 따른 다양성 가중치"""
        # Given
        contents = {i: make_content(i) for i in range(unique_count)}
        events = [make_event(i % unique_count) for i in range(20)]

        # When
        weights = learner.build(events, contents)

        # Then
        assert weights.diversity_weight == expected

    def test_health_weight_increases_with_health_tags(
        self, learner, make_content, make_event
    ):
        """건강 태그 긍정 비중만큼 건강 관련성 가중치 증가"""
        # Given
        content = make_content(1, tags=["health", "tea", "yoga", "sleep"])
        events = [make_event(1, InteractionAction.LIKE) for _ in range(20)]

        # When
        weights = learner.build(events, {1: content})

        # Then
        # 0.3 + 0.25 × 0.4
        assert weights.health_relevance_weight == pytest.approx(0.4)

    def test_health_weight_is_capped(self, learner, make_content, make_event):
        """건강 관련성 가중치는 0.7을 넘지 않음"""
        # Given
        content = make_content(1, tags=["Health", "wellness"])
        events = [make_event(1, InteractionAction.SAVE) for _ in range(20)]

        # When
        weights = learner.build(events, {1: content})

        # Then
        assert weights.health_relevance_weight == pytest.approx(
            DEFAULT_TUNING.max_health_relevance
        )

    def test_uniform_tags_keep_default_tag_importance(
        self, learner, make_content, make_event
    ):
        """태그 선호 편차가 작으면 기본 태그 중요도 유지"""
        content = make_content(1, tags=["a", "b", "c"])
        events = [make_event(1, InteractionAction.LIKE) for _ in range(20)]

        weights = learner.build(events, {1: content})

        assert weights.tag_importance_weight == (
            PersonalizedWeights.defaults().tag_importance_weight
        )

    def test_dominant_tag_raises_tag_importance(
        self, learner, make_content, make_event
    ):
        """태그 선호 편차가 0.5를 넘으면 태그 중요도 0.6"""
        # Given
        liked = make_content(1, tags=["tea"])
        disliked = make_content(2, tags=["coffee"])
        events = [make_event(1, InteractionAction.SHARE) for _ in range(15)] + [
            make_event(2, InteractionAction.DISLIKE) for _ in range(5)
        ]

        # When
        weights = learner.build(events, {1: liked, 2: disliked})

        # Then
        assert weights.tag_importance_weight == 0.6

    def test_seasonal_weight_grows_with_variance(
        self, learner, make_content, make_event
    ):
        """계절 선호 편차가 있으면 계절 가중치가 기본값보다 커짐"""
        # Given
        spring = make_content(1, tags=["春季"])
        winter = make_content(2, tags=["winter"])
        events = [make_event(1, InteractionAction.SAVE) for _ in range(15)] + [
            make_event(2, InteractionAction.VIEW) for _ in range(5)
        ]

        # When
        weights = learner.build(events, {1: spring, 2: winter})

        # Then
        assert weights.seasonal_weight > 0.2
        assert weights.seasonal_weight <= 0.5


class TestGenerate:
    """저장소 연동 테스트"""

    @pytest.mark.asyncio
    async def test_insufficient_history_skips_content_lookup(
        self, learner, store, make_event
    ):
        """행동이 부족하면 콘텐츠를 조회하지 않고 None"""
        # Given
        store.behaviors.get_recent_by_user.return_value = [
            make_event(1) for _ in range(5)
        ]

        # When
        result = await learner.generate(store, 1)

        # Then
        assert result is None
        store.behaviors.get_recent_by_user.assert_awaited_once_with(
            1, limit=500
        )
        store.contents.get_by_ids.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_generates_weights(
        self, learner, store, make_content, make_event
    ):
        """충분한 행동이 있으면 가중치 생성"""
        # Given
        store.behaviors.get_recent_by_user.return_value = [
            make_event(1, InteractionAction.LIKE) for _ in range(20)
        ]
        store.contents.get_by_ids.return_value = [make_content(1, tags=["tea"])]

        # When
        result = await learner.generate(store, 1)

        # Then
        assert result is not None
        assert result.boost_tags == frozenset({"tea"})
        store.contents.get_by_ids.assert_awaited_once_with(
            [1], active_only=False
        )

    @pytest.mark.asyncio
    async def test_storage_failure_returns_none(self, learner, store):
        """조회 실패는 전파하지 않고 None"""
        store.behaviors.get_recent_by_user.side_effect = RuntimeError("db down")

        assert await learner.generate(store, 1) is None
