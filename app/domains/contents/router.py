"""Contents 도메인 라우터

콘텐츠 메타데이터 동기화 및 조회 API 엔드포인트입니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import verify_internal_api_key
from app.core.schemas import (
    APIResponse,
    ListAPIResponse,
    create_list_response,
    create_response,
)
from app.core.utils.pagination import PageParams
from app.domains.contents.models import ContentType
from app.domains.contents.schemas import (
    ContentListRequest,
    ContentResponse,
    ContentSyncRequest,
)
from app.domains.contents.service import ContentService

router = APIRouter()


def get_content_service(
    session: AsyncSession = Depends(get_db),
) -> ContentService:
    """ContentService 의존성"""
    return ContentService(session)


@router.post(
    "",
    response_model=APIResponse[ContentResponse],
    status_code=201,
    dependencies=[Depends(verify_internal_api_key)],
)
async def sync_content(
    data: ContentSyncRequest,
    service: ContentService = Depends(get_content_service),
):
    """콘텐츠 동기화 (Upsert)"""
    content = await service.sync_content(data)
    return create_response(
        data=ContentResponse.model_validate(content),
        message="콘텐츠가 동기화되었습니다.",
    )


@router.get(
    "",
    response_model=ListAPIResponse[ContentResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def get_contents(
    page_params: PageParams = Depends(),
    content_type: Optional[ContentType] = None,
    tags: Optional[list[str]] = Query(None, description="태그 필터 (OR)"),
    include_inactive: bool = False,
    service: ContentService = Depends(get_content_service),
):
    """콘텐츠 목록 조회"""
    contents, total = await service.get_contents(
        ContentListRequest(
            content_type=content_type,
            tags=tags,
            include_inactive=include_inactive,
        ),
        page=page_params.page,
        size=page_params.size,
    )
    return create_list_response(
        data=[ContentResponse.model_validate(c) for c in contents],
        total=total,
        page=page_params.page,
        size=page_params.size,
        message="콘텐츠 목록을 조회했습니다.",
    )


@router.get(
    "/{content_id}",
    response_model=APIResponse[ContentResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def get_content(
    content_id: int,
    service: ContentService = Depends(get_content_service),
):
    """콘텐츠 상세 조회"""
    content = await service.get_content(content_id)
    return create_response(
        data=ContentResponse.model_validate(content),
        message="콘텐츠 정보를 조회했습니다.",
    )


@router.delete(
    "/{content_id}",
    response_model=APIResponse[ContentResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def deactivate_content(
    content_id: int,
    service: ContentService = Depends(get_content_service),
):
    """콘텐츠 비활성화"""
    content = await service.deactivate_content(content_id)
    return create_response(
        data=ContentResponse.model_validate(content),
        message="콘텐츠가 비활성화되었습니다.",
    )
