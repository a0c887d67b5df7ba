"""테스트 설정"""

import itertools
import os
from typing import Generator

import pytest
import pytest_asyncio
from docker import from_env
from docker.errors import DockerException
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from app.core.config import settings
from app.core.database import Base, get_db
from app.core.utils.datetime import now_utc
from app.domains.recommendations.service import (
    RecommendationEngine,
    get_recommendation_engine,
)
from app.domains.recommendations.store import make_store_factory
from app.main import app


def _is_docker_available() -> bool:
    """로컬 환경에서 Docker 접근 가능 여부 확인"""
    if os.getenv("FORCE_DOCKER_TESTS", "").lower() in {"1", "true"}:
        return True
    if os.getenv("SKIP_DOCKER_TESTS", "").lower() in {"1", "true"}:
        return False

    try:
        client = from_env()
        client.ping()
        return True
    except DockerException:
        return False
    except Exception:
        return False


DOCKER_AVAILABLE = _is_docker_available()


@pytest.fixture(scope="session")
def user_id_factory():
    """
    테스트마다 겹치지 않는 PK를 만들기 위한 ID 팩토리.
    UTC 기준 현재 타임스탬프(ms)를 시작값으로 사용
    """
    start = int(now_utc().timestamp() * 1000) % 2_000_000_000
    counter = itertools.count(start=start)

    def _factory(n: int = 1):
        if n == 1:
            return next(counter)
        return [next(counter) for _ in range(n)]

    return _factory


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """PostgreSQL 테스트 컨테이너"""
    if not DOCKER_AVAILABLE:
        pytest.skip("Docker is not available; skipping container-based tests.")

    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def test_database_url(postgres_container: PostgresContainer) -> str:
    """테스트 데이터베이스 URL"""
    # asyncpg를 위한 URL 생성
    return str(
        postgres_container.get_connection_url().replace(
            "postgresql+psycopg2://", "postgresql+asyncpg://"
        )
    )


@pytest_asyncio.fixture
async def session_maker(
    test_database_url: str,
):
    """테스트 데이터베이스 세션 팩토리 (테스트마다 스키마 재생성)"""
    engine = create_async_engine(test_database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    yield maker

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_maker: async_sessionmaker[AsyncSession]):
    """테스트 데이터베이스 세션"""
    async with session_maker() as session:
        yield session
        await session.rollback()


# NOTE:
# pytest-asyncio(0.21+)는 기본적으로 테스트마다 독립적인 event loop를 생성
# session 스코프 async fixture는 이 구조와 충돌하여 ScopeMismatch 에러를 유발할 수 있음
# 이를 방지하기 위해 async fixture는 모두 function 스코프로 유지
@pytest_asyncio.fixture
async def client(session_maker: async_sessionmaker[AsyncSession]):
    """비동기 테스트 클라이언트 (테스트 DB 사용)

    요청 세션과 추천 엔진 저장소 모두 테스트 DB를 사용합니다.
    """

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    engine = RecommendationEngine(store_factory=make_store_factory(session_maker))

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_recommendation_engine] = lambda: engine

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as client:
        yield client

    # 백그라운드 로그 기록이 엔진 dispose 이전에 끝나도록 대기
    await engine.wait_for_pending_logs()
    app.dependency_overrides.clear()


@pytest.fixture
def anyio_backend():
    """anyio 백엔드 설정"""
    return "asyncio"


@pytest.fixture
def api_key_header():
    """Internal API Key 헤더"""
    return {"X-Internal-Api-Key": settings.internal_api_key}
