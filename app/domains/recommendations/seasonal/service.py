"""시즌 부스트 계층

진행 중인 시즌 프로모션으로 추천 점수를 조정합니다. 적용 가능한
프로모션이 없으면 TCM 절기 태그와 일치하는 콘텐츠에 계절 제안 표시만
붙이고 점수는 바꾸지 않습니다.
"""

from datetime import datetime, timedelta
from typing import Optional, Sequence

from app.core.logging import get_logger
from app.core.utils.datetime import now_utc
from app.domains.contents.repository import ContentFilters, ContentOrder
from app.domains.promotions.models import GLOBAL_REGION, SeasonalPromotion
from app.domains.recommendations.background import spawn
from app.domains.recommendations.seasonal.calendar import (
    TCMSeason,
    get_tcm_seasonal_info,
)
from app.domains.recommendations.store import (
    RecommendationStore,
    StoreFactory,
    open_store,
)
from app.domains.recommendations.types import (
    PromotionProvenance,
    RecommendationAlgorithm,
    ScoredContent,
)
from app.domains.users.models import UserProfile

logger = get_logger(__name__)

DEFAULT_PROMOTED_BOOST = 1.5
DEFAULT_TAG_BOOST_EXTRA = 0.5
DEFAULT_TYPE_BOOST = 1.3
AUTOMATIC_PROMOTION_PRIORITY = 100
AUTOMATIC_PROMOTION_BOOST = 1.5


def _type_value(content_type: object) -> str:
    return str(getattr(content_type, "value", content_type))


def tag_boost_factor(promotion: SeasonalPromotion, matched: int) -> float:
    """태그 부스트 배율: 1 + 일치 비율 × (boost - 1)"""
    factor = promotion.global_boost_factor
    if factor is not None and factor > 1:
        extra = factor - 1
    else:
        extra = DEFAULT_TAG_BOOST_EXTRA
    return 1 + (matched / len(promotion.boosted_tags)) * extra


def apply_promotions(
    items: Sequence[ScoredContent],
    promotions: Sequence[SeasonalPromotion],
) -> list[ScoredContent]:
    """프로모션 배율 적용 후 재정렬 (입력 목록은 변경하지 않음)

    Args:
        items: 점수순 추천 목록
        promotions: 우선순위 내림차순 프로모션

    Returns:
        부스트가 적용된 점수 내림차순 목록
    """
    result = [item.with_score(item.score) for item in items]
    by_id = {item.content_id: item for item in result}

    for promotion in promotions:
        factor = promotion.global_boost_factor

        explicit_boost = factor or DEFAULT_PROMOTED_BOOST
        for content_id in promotion.promoted_content or []:
            item = by_id.get(content_id)
            if item is None:
                continue
            item.score = (item.score or 1) * explicit_boost
            item.promotion = PromotionProvenance(
                id=promotion.id, name=promotion.name, boost=explicit_boost
            )

        if promotion.boosted_tags:
            boosted = set(promotion.boosted_tags)
            for item in result:
                matched = [t for t in item.content.tags or [] if t in boosted]
                if not matched:
                    continue
                boost = tag_boost_factor(promotion, len(matched))
                item.score = (item.score or 1) * boost
                if item.promotion is None or item.promotion["boost"] < boost:
                    item.promotion = PromotionProvenance(
                        id=promotion.id,
                        name=promotion.name,
                        boost=boost,
                        matched_tags=matched,
                    )

        if promotion.boosted_content_types:
            type_boost = factor or DEFAULT_TYPE_BOOST
            boosted_types = set(promotion.boosted_content_types)
            for item in result:
                content_type = _type_value(item.content.content_type)
                if content_type not in boosted_types:
                    continue
                item.score = (item.score or 1) * type_boost
                if (
                    item.promotion is None
                    or item.promotion["boost"] < type_boost
                ):
                    item.promotion = PromotionProvenance(
                        id=promotion.id,
                        name=promotion.name,
                        boost=type_boost,
                        matched_type=content_type,
                    )

    result.sort(key=lambda s: s.score, reverse=True)
    return result


def mark_seasonal_suggestions(
    items: Sequence[ScoredContent], season: TCMSeason
) -> list[ScoredContent]:
    """TCM 절기 태그와 일치하는 항목에 계절 제안 표시 (점수 변경 없음)"""
    recommended = season.recommended_tags
    result = []
    for item in items:
        tags = set(item.content.tags or [])
        matched = [tag for tag in recommended if tag in tags]
        if matched:
            result.append(
                item.with_score(
                    item.score, seasonal_suggestion=True, season_tags=matched
                )
            )
        else:
            result.append(item)
    return result


def automatic_promotion_period(now: datetime) -> tuple[datetime, datetime]:
    """이번 달 1일 0시 ~ 다음 달 말일 23:59:59.999999"""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    year, month = now.year, now.month + 2
    if month > 12:
        year, month = year + 1, month - 12
    end = start.replace(year=year, month=month) - timedelta(microseconds=1)
    return start, end


class SeasonalBoostService:
    """시즌 프로모션 적용 서비스"""

    def __init__(self, store_factory: StoreFactory = open_store):
        self.store_factory = store_factory

    async def get_promotions_for_user(
        self,
        store: RecommendationStore,
        user_id: int,
        profile: Optional[UserProfile] = None,
        now: Optional[datetime] = None,
    ) -> list[SeasonalPromotion]:
        """사용자에게 적용 가능한 진행 중 프로모션 (우선순위 내림차순)

        프로필이 없으면 세그먼트 없음, 지역 global로 간주합니다.
        """
        if profile is None:
            profile = await store.profiles.get_by_user_id(user_id)

        promotions = await store.promotions.get_active(now or now_utc())
        segments = list(profile.segments or []) if profile else []
        region = (profile.region if profile else None) or GLOBAL_REGION

        applicable = [p for p in promotions if p.targets(segments, region)]
        applicable.sort(key=lambda p: p.priority or 0, reverse=True)
        return applicable

    async def apply_seasonal_boosts(
        self,
        store: RecommendationStore,
        items: Sequence[ScoredContent],
        user_id: int,
        profile: Optional[UserProfile] = None,
        now: Optional[datetime] = None,
    ) -> list[ScoredContent]:
        """추천 목록에 시즌 부스트 적용

        실패 시 입력 목록을 그대로 반환합니다.
        """
        if not items:
            return list(items)

        now = now or now_utc()
        try:
            promotions = await self.get_promotions_for_user(
                store, user_id, profile=profile, now=now
            )
        except Exception as e:
            logger.warning(
                f"Failed to load seasonal promotions: {e}",
                extra={"user_id": user_id},
                exc_info=True,
            )
            return list(items)

        if not promotions:
            return mark_seasonal_suggestions(items, get_tcm_seasonal_info(now))
        return apply_promotions(items, promotions)

    async def get_seasonal_highlights(
        self,
        store: RecommendationStore,
        user_id: int,
        limit: int = 10,
        now: Optional[datetime] = None,
    ) -> list[ScoredContent]:
        """시즌 하이라이트 콘텐츠

        1. 우선순위 순으로 프로모션의 명시 콘텐츠
        2. 부족하면 부스트 태그를 가진 콘텐츠로 보충
        3. 프로모션으로 얻은 콘텐츠가 없으면 TCM 절기 태그 콘텐츠 (계절 제안)

        Args:
            store: 저장소
            user_id: 사용자 ID
            limit: 최대 결과 수
            now: 기준 시각

        Returns:
            하이라이트 목록
        """
        now = now or now_utc()
        promotions = await self.get_promotions_for_user(store, user_id, now=now)

        highlights: list[ScoredContent] = []
        seen: set[int] = set()
        used: set[int] = set()

        for promotion in promotions:
            if len(highlights) >= limit:
                break
            if not promotion.promoted_content:
                continue

            items = await store.contents.find(
                ContentFilters(
                    ids=list(promotion.promoted_content),
                    published_before=now,
                ),
                limit=None,
            )
            order = {cid: i for i, cid in enumerate(promotion.promoted_content)}
            boost = promotion.global_boost_factor or DEFAULT_PROMOTED_BOOST
            for item in sorted(items, key=lambda c: order[c.id]):
                if item.id in seen:
                    continue
                seen.add(item.id)
                used.add(promotion.id)
                highlights.append(
                    ScoredContent(
                        content=item,
                        score=boost,
                        algorithm=RecommendationAlgorithm.SEASONAL,
                        promotion=PromotionProvenance(
                            id=promotion.id, name=promotion.name, boost=boost
                        ),
                    )
                )

        tag_promotions = [p for p in promotions if p.boosted_tags]
        if len(highlights) < limit and tag_promotions:
            boosted_tags = sorted(
                {tag for p in tag_promotions for tag in p.boosted_tags}
            )
            items = await store.contents.find(
                ContentFilters(
                    any_tags=boosted_tags,
                    exclude_ids=sorted(seen) or None,
                    published_before=now,
                ),
                order=ContentOrder.RECENT,
                limit=limit - len(highlights),
            )
            for item in items:
                tags = set(item.tags or [])
                promotion = next(
                    p for p in tag_promotions if tags & set(p.boosted_tags)
                )
                promoted_tags = set(promotion.boosted_tags)
                matched = [t for t in item.tags if t in promoted_tags]
                boost = tag_boost_factor(promotion, len(matched))
                used.add(promotion.id)
                highlights.append(
                    ScoredContent(
                        content=item,
                        score=boost,
                        algorithm=RecommendationAlgorithm.SEASONAL,
                        promotion=PromotionProvenance(
                            id=promotion.id,
                            name=promotion.name,
                            boost=boost,
                            matched_tags=matched,
                        ),
                    )
                )

        if used:
            spawn(
                self._record_impressions(sorted(used)),
                "promotion impressions",
            )

        if highlights:
            return highlights[:limit]

        season = get_tcm_seasonal_info(now)
        items = await store.contents.find(
            ContentFilters(
                any_tags=list(season.recommended_tags), published_before=now
            ),
            order=ContentOrder.RECENT,
            limit=limit,
        )
        return mark_seasonal_suggestions(
            [
                ScoredContent(
                    content=item,
                    score=1.0,
                    algorithm=RecommendationAlgorithm.SEASONAL,
                )
                for item in items
            ],
            season,
        )

    async def _record_impressions(self, promotion_ids: list[int]) -> None:
        async with self.store_factory() as store:
            await store.promotions.increment_impressions(promotion_ids)

    async def create_automatic_seasonal_promotion(
        self, store: RecommendationStore, now: Optional[datetime] = None
    ) -> Optional[SeasonalPromotion]:
        """현재 TCM 절기 자동 프로모션 생성

        같은 절기의 자동 프로모션이 이미 진행 중이면 생성하지 않습니다.

        Returns:
            생성된 프로모션 또는 None
        """
        now = now or now_utc()
        season = get_tcm_seasonal_info(now)
        recommended = set(season.recommended_tags)

        for promotion in await store.promotions.get_active(now):
            if (
                promotion.is_automatic
                and set(promotion.boosted_tags) == recommended
            ):
                logger.info(
                    "Automatic seasonal promotion already active: "
                    f"{promotion.id}"
                )
                return None

        start, end = automatic_promotion_period(now)
        promotion = SeasonalPromotion(
            name=(
                f"{season.name} {now.year} - TCM {season.element} "
                "Element Focus"
            ),
            description=season.guidance,
            start_date=start,
            end_date=end,
            is_active=True,
            priority=AUTOMATIC_PROMOTION_PRIORITY,
            promoted_content=[],
            boosted_tags=list(season.recommended_tags),
            boosted_content_types=[],
            target_user_segments=[],
            regions=[],
            global_boost_factor=AUTOMATIC_PROMOTION_BOOST,
            is_automatic=True,
        )
        created = await store.promotions.create(promotion)
        logger.info(
            f"Automatic seasonal promotion created: {created.id}",
            extra={"season": season.key},
        )
        return created
