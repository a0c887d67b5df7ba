"""계절 달력

두 가지 달력을 제공합니다.

- 콘텐츠 계절 (4계절): 콘텐츠 태그의 계절 관련성 점수와 계절 선호도 학습에 사용
- TCM 절기 (5계절): 한의학 오행 기반 절기 정보. 프로모션이 없을 때의
  계절 제안과 자동 시즌 프로모션 생성에 사용
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional


class Season(str, Enum):
    """콘텐츠 계절"""

    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


SEASON_TAGS: Mapping[Season, frozenset[str]] = MappingProxyType(
    {
        Season.SPRING: frozenset({"春季", "spring", "春分", "清明", "谷雨"}),
        Season.SUMMER: frozenset({"夏季", "summer", "夏至", "小暑", "大暑"}),
        Season.AUTUMN: frozenset({"秋季", "autumn", "fall", "秋分", "寒露"}),
        Season.WINTER: frozenset({"冬季", "winter", "冬至", "小寒", "大寒"}),
    }
)

OPPOSITE_SEASON: Mapping[Season, Season] = MappingProxyType(
    {
        Season.SPRING: Season.AUTUMN,
        Season.SUMMER: Season.WINTER,
        Season.AUTUMN: Season.SPRING,
        Season.WINTER: Season.SUMMER,
    }
)


def current_season(now: datetime) -> Season:
    """기준 시각의 콘텐츠 계절 (3~5월 봄, 6~8월 여름, 9~11월 가을)"""
    month = now.month
    if 3 <= month <= 5:
        return Season.SPRING
    if 6 <= month <= 8:
        return Season.SUMMER
    if 9 <= month <= 11:
        return Season.AUTUMN
    return Season.WINTER


def season_of_tags(tags: Iterable[str]) -> Optional[Season]:
    """태그가 가리키는 첫 번째 계절 (없으면 None)"""
    tag_set = {tag.lower() for tag in tags}
    for season, season_tags in SEASON_TAGS.items():
        if tag_set & season_tags:
            return season
    return None


@dataclass(frozen=True)
class TCMSeason:
    """TCM 절기 정보

    Attributes:
        key: 절기 식별자 (spring, summer, late_summer, autumn, winter)
        name: 표시 이름
        months: 해당 월 (1~12)
        element: 오행
        organ: 관련 장부
        taste: 맛
        emotion: 감정
        color: 색
        recommended_tags: 추천 태그
        avoid_tags: 회피 태그
        seasonal_foods: 제철 음식
    """

    key: str
    name: str
    months: tuple[int, ...]
    element: str
    organ: str
    taste: str
    emotion: str
    color: str
    recommended_tags: tuple[str, ...]
    avoid_tags: tuple[str, ...]
    seasonal_foods: tuple[str, ...]

    @property
    def guidance(self) -> str:
        return (
            f"In {self.name}, focus on supporting your {self.organ} system "
            f"through {self.element} element balancing. Incorporate "
            f"{self.taste} flavors and {self.color}-colored foods into "
            "your diet."
        )

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "months": list(self.months),
            "element": self.element,
            "organ": self.organ,
            "taste": self.taste,
            "emotion": self.emotion,
            "color": self.color,
            "recommended_tags": list(self.recommended_tags),
            "avoid_tags": list(self.avoid_tags),
            "seasonal_foods": list(self.seasonal_foods),
            "guidance": self.guidance,
        }


TCM_SEASONS: tuple[TCMSeason, ...] = (
    TCMSeason(
        key="spring",
        name="Spring",
        months=(2, 3, 4),
        element="Wood",
        organ="Liver",
        taste="Sour",
        emotion="Anger",
        color="Green",
        recommended_tags=(
            "spring",
            "detox",
            "cleansing",
            "liver",
            "gallbladder",
            "wood element",
            "green tea",
            "sour foods",
            "sprouts",
            "growth",
            "renewal",
            "mint",
            "leafy greens",
        ),
        avoid_tags=("heavy foods", "excess alcohol", "greasy foods"),
        seasonal_foods=(
            "leafy greens",
            "sprouts",
            "green tea",
            "vinegar",
            "wheat",
            "plums",
            "lemons",
            "limes",
            "goji berries",
        ),
    ),
    TCMSeason(
        key="summer",
        name="Summer",
        months=(5, 6, 7),
        element="Fire",
        organ="Heart",
        taste="Bitter",
        emotion="Joy",
        color="Red",
        recommended_tags=(
            "summer",
            "heart",
            "small intestine",
            "circulation",
            "fire element",
            "cooling foods",
            "bitter foods",
            "hydration",
            "maturity",
            "joy",
            "red foods",
            "cooling teas",
        ),
        avoid_tags=(
            "excessive heat",
            "spicy foods",
            "dehydration",
            "heavy exercise",
        ),
        seasonal_foods=(
            "watermelon",
            "cucumber",
            "bitter greens",
            "celery",
            "corn",
            "lemon water",
            "mung beans",
            "chrysanthemum tea",
        ),
    ),
    TCMSeason(
        key="late_summer",
        name="Late Summer",
        months=(8,),
        element="Earth",
        organ="Spleen",
        taste="Sweet",
        emotion="Pensiveness",
        color="Yellow",
        recommended_tags=(
            "late summer",
            "spleen",
            "stomach",
            "digestion",
            "earth element",
            "sweet foods",
            "centered",
            "grounding",
            "stability",
            "nourishment",
            "yellow foods",
        ),
        avoid_tags=(
            "raw foods",
            "excessive sweets",
            "cold foods",
            "iced drinks",
        ),
        seasonal_foods=(
            "millet",
            "sweet potatoes",
            "squash",
            "carrots",
            "ginger",
            "honey",
            "dates",
            "rice",
            "oats",
            "chicken",
        ),
    ),
    TCMSeason(
        key="autumn",
        name="Autumn",
        months=(9, 10, 11),
        element="Metal",
        organ="Lung",
        taste="Pungent",
        emotion="Grief",
        color="White",
        recommended_tags=(
            "autumn",
            "fall",
            "lung",
            "large intestine",
            "respiratory",
            "metal element",
            "pungent foods",
            "immune support",
            "white foods",
            "letting go",
            "breath",
            "air",
            "spicy foods",
        ),
        avoid_tags=("cold foods", "phlegm producing foods", "dairy excess"),
        seasonal_foods=(
            "ginger",
            "onions",
            "garlic",
            "white rice",
            "almonds",
            "radish",
            "daikon",
            "cabbage",
            "pears",
            "white mushrooms",
        ),
    ),
    TCMSeason(
        key="winter",
        name="Winter",
        months=(12, 1),
        element="Water",
        organ="Kidney",
        taste="Salty",
        emotion="Fear",
        color="Black/Blue",
        recommended_tags=(
            "winter",
            "kidney",
            "bladder",
            "adrenals",
            "bones",
            "water element",
            "salty foods",
            "warming foods",
            "longevity",
            "rest",
            "restoration",
            "black foods",
            "blue foods",
        ),
        avoid_tags=("cold foods", "raw foods", "excess salt", "stimulants"),
        seasonal_foods=(
            "bone broth",
            "black beans",
            "kidney beans",
            "seaweed",
            "walnuts",
            "black sesame",
            "dark leafy greens",
            "lamb",
        ),
    ),
)

_TCM_SEASON_BY_MONTH: Mapping[int, TCMSeason] = MappingProxyType(
    {month: season for season in TCM_SEASONS for month in season.months}
)


def get_tcm_seasonal_info(now: datetime) -> TCMSeason:
    """기준 시각의 TCM 절기 정보

    Args:
        now: 기준 시각

    Returns:
        현재 절기
    """
    return _TCM_SEASON_BY_MONTH[now.month]
