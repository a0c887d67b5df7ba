"""A/B 테스트 단위 테스트"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from app.domains.behaviors.models import InteractionAction
from app.domains.recommendations.ab_testing import (
    ABTestService,
    assign_variant,
    is_in_test_population,
    resolve_ab_test_choice,
    simple_hash,
)
from app.domains.recommendations.exceptions import (
    ABTestNotFoundException,
    InvalidABTestException,
)
from app.domains.recommendations.schemas import ABTestCreate, ABTestVariant
from app.domains.recommendations.types import RecommendationAlgorithm


class TestHashing:
    """해시 기반 배정 테스트"""

    @pytest.mark.parametrize(
        "value,expected",
        [("", 0), ("a", 97), ("ab", 3105), ("1:1", 48936)],
    )
    def test_simple_hash(self, value, expected):
        """h = h × 31 + code"""
        assert simple_hash(value) == expected

    def test_simple_hash_is_non_negative_on_overflow(self):
        """32비트 래핑 후에도 음수가 아님"""
        assert simple_hash("x" * 50) >= 0

    def test_assign_variant_is_deterministic(self, make_ab_test):
        """같은 사용자는 항상 같은 변형"""
        test = make_ab_test()

        # "1" → 49 % 2 = 1, "2" → 50 % 2 = 0
        assert assign_variant(test, 1)["name"] == "treatment"
        assert assign_variant(test, 2)["name"] == "control"
        assert assign_variant(test, 1) == assign_variant(test, 1)

    def test_assign_variant_without_variants(self, make_ab_test):
        test = make_ab_test()
        test.variants = []

        assert assign_variant(test, 1) is None

    def test_population_gate(self, make_ab_test):
        """hash("{test}:{user}") % 100 < 대상 비율"""
        # hash("1:1") % 100 = 36
        assert is_in_test_population(make_ab_test(target_user_percentage=37), 1)
        assert not is_in_test_population(
            make_ab_test(target_user_percentage=36), 1
        )
        assert is_in_test_population(make_ab_test(target_user_percentage=100), 1)


class TestResolveChoice:
    """A/B 테스트 알고리즘 선택 테스트"""

    @pytest.mark.asyncio
    async def test_running_test_assigns_variant(self, store, make_ab_test, now):
        """진행 중 테스트의 배정 변형 알고리즘 사용"""
        store.ab_tests.get_by_id.return_value = make_ab_test()

        choice = await resolve_ab_test_choice(store, 1, 1, now=now)

        assert choice.algorithm == RecommendationAlgorithm.CONTENT_BASED
        assert choice.ab_test_id == 1
        assert choice.ab_test_variant == "treatment"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"is_active": False},
            {"start_date_offset": timedelta(days=1)},
            {"end_date_offset": -timedelta(hours=1)},
        ],
    )
    async def test_inactive_or_out_of_window(
        self, store, make_ab_test, now, overrides
    ):
        """비활성/기간 외 테스트는 None"""
        test = make_ab_test(is_active=overrides.get("is_active", True))
        if "start_date_offset" in overrides:
            test.start_date = now + overrides["start_date_offset"]
        if "end_date_offset" in overrides:
            test.end_date = now + overrides["end_date_offset"]
        store.ab_tests.get_by_id.return_value = test

        assert await resolve_ab_test_choice(store, 1, 1, now=now) is None

    @pytest.mark.asyncio
    async def test_missing_test(self, store, now):
        assert await resolve_ab_test_choice(store, 404, 1, now=now) is None

    @pytest.mark.asyncio
    async def test_user_outside_population(self, store, make_ab_test, now):
        """대상 비율 밖 사용자는 None"""
        store.ab_tests.get_by_id.return_value = make_ab_test(
            target_user_percentage=10
        )

        assert await resolve_ab_test_choice(store, 1, 1, now=now) is None


@pytest.fixture
def service(store):
    service = ABTestService(MagicMock())
    service.store = store
    return service


def _variants(*pairs):
    return [ABTestVariant(name=name, algorithm=algo) for name, algo in pairs]


class TestABTestService:
    """ABTestService 테스트"""

    @pytest.mark.asyncio
    async def test_create_with_default_window(self, service, store):
        """시작 기본값 현재, 종료 기본값 30일 후"""
        # Given
        data = ABTestCreate(
            name="cb vs hybrid",
            variants=_variants(("a", "content-based"), ("b", "hybrid")),
        )

        # When
        created = await service.create_ab_test(data)

        # Then
        assert created.end_date - created.start_date == timedelta(days=30)
        assert created.variants == [
            {"name": "a", "algorithm": "content-based"},
            {"name": "b", "algorithm": "hybrid"},
        ]
        assert created.is_active is True
        store.ab_tests.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_requires_two_variants(self, service):
        """변형이 2개 미만이면 예외"""
        data = ABTestCreate(name="x", variants=_variants(("a", "hybrid")))

        with pytest.raises(InvalidABTestException):
            await service.create_ab_test(data)

    @pytest.mark.asyncio
    async def test_create_rejects_duplicate_names(self, service):
        """변형 이름 중복 시 예외"""
        data = ABTestCreate(
            name="x",
            variants=_variants(("a", "hybrid"), ("a", "content-based")),
        )

        with pytest.raises(InvalidABTestException) as exc_info:
            await service.create_ab_test(data)

        assert exc_info.value.detail_info == {"variants": ["a", "a"]}

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_algorithm(self, service):
        """실행할 수 없는 알고리즘은 예외"""
        data = ABTestCreate(
            name="x", variants=_variants(("a", "hybrid"), ("b", "popular"))
        )

        with pytest.raises(InvalidABTestException) as exc_info:
            await service.create_ab_test(data)

        assert exc_info.value.detail_info["algorithms"] == ["popular"]

    @pytest.mark.asyncio
    async def test_create_rejects_inverted_window(self, service, now):
        """종료 일시가 시작 이전이면 예외"""
        data = ABTestCreate(
            name="x",
            variants=_variants(("a", "hybrid"), ("b", "content-based")),
            start_date=now,
            end_date=now - timedelta(days=1),
        )

        with pytest.raises(InvalidABTestException):
            await service.create_ab_test(data)

    @pytest.mark.asyncio
    async def test_get_missing_test_raises(self, service):
        with pytest.raises(ABTestNotFoundException):
            await service.get_ab_test(999)

    @pytest.mark.asyncio
    async def test_get_ab_tests_paginates(self, service, store, make_ab_test):
        """page/size → skip/limit"""
        store.ab_tests.get_list.return_value = [make_ab_test()]
        store.ab_tests.count.return_value = 21

        tests, total = await service.get_ab_tests(page=2, size=10)

        assert len(tests) == 1
        assert total == 21
        store.ab_tests.get_list.assert_awaited_once_with(
            skip=10, limit=10, active_only=False
        )

    @pytest.mark.asyncio
    async def test_deactivate(self, service, store, make_ab_test):
        store.ab_tests.get_by_id.return_value = make_ab_test()

        result = await service.deactivate_ab_test(1)

        assert result.is_active is False
        store.ab_tests.update.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_results_grouped_by_algorithm(
        self, service, store, make_ab_test, make_log, make_event, now
    ):
        """기간 내 로그를 알고리즘별로 집계"""
        # Given
        test = make_ab_test(end_date=now + timedelta(days=1))
        store.ab_tests.get_by_id.return_value = test
        store.logs.get_by_test.return_value = [
            make_log([1, 2], algorithm="hybrid", user_id=1, ab_test_id=1),
            make_log([3], algorithm="content-based", user_id=2, ab_test_id=1),
            make_log(
                [9],
                algorithm="hybrid",
                user_id=3,
                ab_test_id=1,
                created_at=now - timedelta(days=5),
            ),
        ]
        store.behaviors.get_by_users_and_contents.return_value = [
            make_event(1, InteractionAction.VIEW, user_id=1),
            make_event(1, InteractionAction.LIKE, user_id=1),
            make_event(3, InteractionAction.VIEW, user_id=2),
            make_event(3, InteractionAction.SAVE, user_id=2),
            make_event(3, InteractionAction.SHARE, user_id=2),
        ]

        # When
        result = await service.get_ab_test_results(1)

        # Then
        hybrid = result["results"]["hybrid"]
        assert hybrid["users"] == 1
        assert hybrid["impressions"] == 2
        assert hybrid["views"] == 1
        assert hybrid["likes"] == 1
        assert hybrid["ctr"] == 0.5
        assert hybrid["engagement_rate"] == 1.0

        content_based = result["results"]["content-based"]
        assert content_based["impressions"] == 1
        assert content_based["engagement_rate"] == 2.0

        args, kwargs = store.behaviors.get_by_users_and_contents.call_args
        assert args == ({1, 2}, {1, 2, 3})
        assert kwargs == {"since": test.start_date, "until": test.end_date}
        assert result["is_active"] is True
