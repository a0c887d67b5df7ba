"""create_recommendation_tables

Revision ID: a3f1c9d27b40
Revises:
Create Date: 2026-03-01 10:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a3f1c9d27b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at(comment: str = "생성 일시") -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
        comment=comment,
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        nullable=True,
        comment="수정 일시",
    )


def _string_array(name: str, comment: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.ARRAY(sa.String()),
        server_default="{}",
        nullable=False,
        comment=comment,
    )


def upgrade() -> None:
    """업그레이드 마이그레이션: 추천 엔진 테이블 생성"""
    # contents
    op.create_table(
        "contents",
        sa.Column(
            "id",
            sa.Integer(),
            nullable=False,
            autoincrement=False,
            comment="콘텐츠 ID (메인 서버 동기화)",
        ),
        sa.Column(
            "title", sa.String(length=500), nullable=False, comment="콘텐츠 제목"
        ),
        sa.Column(
            "content_type",
            sa.String(length=20),
            nullable=False,
            comment="콘텐츠 타입 (article/recipe/quiz/tutorial/video/podcast)",
        ),
        _string_array(
            "tags", "태그 목록 (순서 유지, 첫 번째 태그가 대표 태그)"
        ),
        sa.Column(
            "time_of_day_relevance",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
            comment="시간대별 적합도 (morning/afternoon/evening/night → 0~1)",
        ),
        sa.Column(
            "published_at",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="게시 일시",
        ),
        sa.Column(
            "is_active",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
            comment="활성 여부",
        ),
        sa.Column(
            "view_count",
            sa.Integer(),
            server_default="0",
            nullable=False,
            comment="조회수",
        ),
        sa.Column(
            "like_count",
            sa.Integer(),
            server_default="0",
            nullable=False,
            comment="좋아요 수",
        ),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_contents_active_published",
        "contents",
        ["published_at"],
        unique=False,
        postgresql_where=sa.text("is_active"),
    )
    op.create_index(
        "ix_contents_content_type", "contents", ["content_type"], unique=False
    )
    op.create_index(
        "ix_contents_popularity",
        "contents",
        ["view_count", "published_at"],
        unique=False,
    )
    op.create_index(
        "ix_contents_tags",
        "contents",
        ["tags"],
        unique=False,
        postgresql_using="gin",
    )

    # user_profiles
    op.create_table(
        "user_profiles",
        sa.Column(
            "user_id",
            sa.Integer(),
            nullable=False,
            autoincrement=False,
            comment="메인 서버에서 제공하는 사용자 ID",
        ),
        sa.Column(
            "constitution",
            sa.String(length=50),
            nullable=True,
            comment="체질 분류 태그",
        ),
        _string_array("health_goals", "건강 목표 목록"),
        _string_array("chronic_conditions", "만성 질환 목록"),
        _string_array("preference_tags", "선호 태그 목록"),
        _string_array("segments", "사용자 세그먼트 (프로모션 타겟팅)"),
        sa.Column(
            "region", sa.String(length=50), nullable=True, comment="지역 코드"
        ),
        _created_at(),
        _updated_at(),
        sa.Column(
            "last_sync_at",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="마지막 동기화 일시",
        ),
        sa.PrimaryKeyConstraint("user_id"),
    )

    # interaction_events
    op.create_table(
        "interaction_events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="사용자 ID"),
        sa.Column(
            "content_id", sa.Integer(), nullable=False, comment="콘텐츠 ID"
        ),
        sa.Column(
            "action", sa.String(length=20), nullable=False, comment="행동 종류"
        ),
        sa.Column(
            "duration", sa.Float(), nullable=True, comment="체류 시간 (초)"
        ),
        sa.Column(
            "completion_rate",
            sa.Float(),
            nullable=True,
            comment="완료율 (0~1)",
        ),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
            comment="추가 메타데이터",
        ),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
            comment="발생 일시",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_interaction_events_user_ts",
        "interaction_events",
        ["user_id", "timestamp"],
        unique=False,
    )
    op.create_index(
        "ix_interaction_events_content_user",
        "interaction_events",
        ["content_id", "user_id"],
        unique=False,
    )

    # user_interests
    op.create_table(
        "user_interests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="사용자 ID"),
        sa.Column(
            "tag", sa.String(length=100), nullable=False, comment="태그 (소문자)"
        ),
        sa.Column(
            "interaction_count",
            sa.Integer(),
            nullable=False,
            comment="긍정 상호작용 횟수",
        ),
        sa.Column(
            "last_interaction",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="마지막 상호작용 일시",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "tag", name="uq_user_interest_tag"),
    )
    op.create_index(
        op.f("ix_user_interests_user_id"),
        "user_interests",
        ["user_id"],
        unique=False,
    )

    # seasonal_promotions
    op.create_table(
        "seasonal_promotions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "name", sa.String(length=200), nullable=False, comment="프로모션 이름"
        ),
        sa.Column("description", sa.Text(), nullable=True, comment="설명"),
        sa.Column(
            "start_date",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="시작 일시",
        ),
        sa.Column(
            "end_date",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="종료 일시",
        ),
        sa.Column(
            "is_active",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
            comment="활성 여부",
        ),
        sa.Column(
            "priority",
            sa.Integer(),
            server_default="1",
            nullable=False,
            comment="우선순위 (높을수록 먼저 적용)",
        ),
        sa.Column(
            "promoted_content",
            postgresql.ARRAY(sa.Integer()),
            server_default="{}",
            nullable=False,
            comment="명시적 프로모션 콘텐츠 ID 목록",
        ),
        _string_array("boosted_tags", "부스트 태그 목록"),
        _string_array("boosted_content_types", "부스트 콘텐츠 타입 목록"),
        _string_array(
            "target_user_segments", "대상 사용자 세그먼트 (비어 있으면 전체)"
        ),
        _string_array("regions", "대상 지역 (비어 있거나 global이면 전체)"),
        sa.Column(
            "global_boost_factor",
            sa.Float(),
            nullable=True,
            comment="부스트 배율 (1~3)",
        ),
        sa.Column(
            "is_automatic",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
            comment="TCM 절기 자동 생성 여부",
        ),
        sa.Column(
            "impressions",
            sa.Integer(),
            server_default="0",
            nullable=False,
            comment="노출 수",
        ),
        sa.Column(
            "clicks",
            sa.Integer(),
            server_default="0",
            nullable=False,
            comment="클릭 수",
        ),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_seasonal_promotions_active_period",
        "seasonal_promotions",
        ["start_date", "end_date"],
        unique=False,
        postgresql_where=sa.text("is_active"),
    )

    # ab_tests
    op.create_table(
        "ab_tests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "name", sa.String(length=200), nullable=False, comment="테스트 이름"
        ),
        sa.Column("description", sa.Text(), nullable=True, comment="설명"),
        sa.Column(
            "variants",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="변형 목록 (name, algorithm)",
        ),
        sa.Column(
            "target_user_percentage",
            sa.Integer(),
            server_default="100",
            nullable=False,
            comment="테스트 대상 사용자 비율 (0~100)",
        ),
        sa.Column(
            "start_date",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="시작 일시",
        ),
        sa.Column(
            "end_date",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="종료 일시",
        ),
        sa.Column(
            "is_active",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
            comment="활성 여부",
        ),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
    )

    # recommendation_logs
    op.create_table(
        "recommendation_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="사용자 ID"),
        sa.Column(
            "content_ids",
            postgresql.ARRAY(sa.Integer()),
            server_default="{}",
            nullable=False,
            comment="추천된 콘텐츠 ID (순위순)",
        ),
        sa.Column(
            "algorithm",
            sa.String(length=50),
            nullable=False,
            comment="사용된 알고리즘",
        ),
        sa.Column(
            "scores",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="콘텐츠별 점수 (content_ids 순서)",
        ),
        sa.Column(
            "ab_test_id", sa.Integer(), nullable=True, comment="A/B 테스트 ID"
        ),
        sa.Column(
            "ab_test_variant",
            sa.String(length=100),
            nullable=True,
            comment="배정된 변형 이름",
        ),
        _created_at("추천 일시"),
        sa.ForeignKeyConstraint(
            ["ab_test_id"], ["ab_tests.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_recommendation_logs_user_created",
        "recommendation_logs",
        ["user_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_recommendation_logs_ab_test",
        "recommendation_logs",
        ["ab_test_id"],
        unique=False,
    )


def downgrade() -> None:
    """다운그레이드 마이그레이션: 추천 엔진 테이블 삭제"""
    op.drop_index(
        "ix_recommendation_logs_ab_test", table_name="recommendation_logs"
    )
    op.drop_index(
        "ix_recommendation_logs_user_created", table_name="recommendation_logs"
    )
    op.drop_table("recommendation_logs")
    op.drop_table("ab_tests")
    op.drop_index(
        "ix_seasonal_promotions_active_period",
        table_name="seasonal_promotions",
    )
    op.drop_table("seasonal_promotions")
    op.drop_index(
        op.f("ix_user_interests_user_id"), table_name="user_interests"
    )
    op.drop_table("user_interests")
    op.drop_index(
        "ix_interaction_events_content_user", table_name="interaction_events"
    )
    op.drop_index(
        "ix_interaction_events_user_ts", table_name="interaction_events"
    )
    op.drop_table("interaction_events")
    op.drop_table("user_profiles")
    op.drop_index("ix_contents_tags", table_name="contents")
    op.drop_index("ix_contents_popularity", table_name="contents")
    op.drop_index("ix_contents_content_type", table_name="contents")
    op.drop_index("ix_contents_active_published", table_name="contents")
    op.drop_table("contents")
