"""Users 도메인 라우터

사용자 건강 프로필 동기화 API 엔드포인트입니다.
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import verify_internal_api_key
from app.core.schemas import APIResponse, create_response
from app.domains.users.schemas import UserProfileResponse, UserProfileSync
from app.domains.users.service import UserProfileService

router = APIRouter()


def get_user_profile_service(
    session: AsyncSession = Depends(get_db),
) -> UserProfileService:
    """UserProfileService 의존성"""
    return UserProfileService(session)


@router.get(
    "/{user_id}/profile",
    response_model=APIResponse[UserProfileResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def get_user_profile(
    user_id: int = Path(..., gt=0),
    service: UserProfileService = Depends(get_user_profile_service),
):
    """사용자 프로필 조회"""
    profile = await service.get_profile(user_id)
    return create_response(
        data=UserProfileResponse.model_validate(profile),
        message="사용자 프로필을 조회했습니다.",
    )


@router.put(
    "/{user_id}/profile",
    response_model=APIResponse[UserProfileResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def upsert_user_profile(
    data: UserProfileSync,
    user_id: int = Path(..., gt=0),
    service: UserProfileService = Depends(get_user_profile_service),
):
    """사용자 프로필 동기화 (Upsert)"""
    profile = await service.upsert_profile(user_id, data)
    return create_response(
        data=UserProfileResponse.model_validate(profile),
        message="사용자 프로필이 동기화되었습니다.",
    )
