"""API v1 라우터"""

from typing import Any

from fastapi import APIRouter

from app.core.schemas import APIResponse
from app.domains.contents.router import router as contents_router
from app.domains.promotions.router import router as promotions_router
from app.domains.recommendations.router import router as recommendations_router
from app.domains.users.router import router as users_router

api_router = APIRouter()

# 도메인 라우터 등록
api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(
    contents_router, prefix="/contents", tags=["Contents"]
)
api_router.include_router(
    promotions_router, prefix="/promotions", tags=["Promotions"]
)
api_router.include_router(
    recommendations_router,
    prefix="/recommendations",
    tags=["Recommendations"],
)


@api_router.get("/", response_model=APIResponse[dict[str, Any]])
async def api_v1_root():
    """API v1 루트 엔드포인트"""
    return APIResponse(
        success=True,
        message="Wellness Recommendation Engine API v1",
        data={
            "version": "1.0.0",
            "docs": "/docs",
        },
    )
