# FastAPI 라우터. /api/couplet/generate (춘련 텍스트) 와 /api/couplet/poster (포스터 이미지) 엔드포인트 제공.

# backend/routers/couplet.py
from typing import Any

from fastapi import APIRouter, Depends, Request
from openai import AsyncOpenAI

from backend.config import Settings
from backend.models.couplet_model import CoupletGenerateResponse, ErrorResponse
from backend.models.poster_model import PosterResponse
from backend.services.couplet_service import generate_couplet
from backend.services.poster_service import generate_poster

router = APIRouter(prefix="/api/couplet", tags=["Couplet"])

# 오류 응답 (400 검증 / 500 설정 누락 / 502 업스트림·파싱 / 504 타임아웃) 은 모두 {requestId, error}
ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 500, 502, 504)}


# ---------------------------------------------------------
# 의존성 (테스트에서 dependency_overrides 로 교체)
# ---------------------------------------------------------
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_client(request: Request) -> AsyncOpenAI:
    return request.app.state.client


async def json_body(request: Request) -> Any:
    # 파싱 불가한 본문은 None → 검증 단계에서 400 (FastAPI 기본 422 사용 안 함)
    try:
        return await request.json()
    except ValueError:
        return None


# ---------------------------------------------------------
# 🧧 춘련 생성
# ---------------------------------------------------------
@router.post(
    "/generate",
    response_model=CoupletGenerateResponse,
    responses=ERROR_RESPONSES,
    summary="春联生成",
    description="主题/风格/行业/语气/禁忌词를 받아 텍스트 모델로 上联·下联·横批·解释를 생성합니다.",
)
async def create_couplet(
    body: Any = Depends(json_body),
    settings: Settings = Depends(get_settings),
    client: AsyncOpenAI = Depends(get_client),
):
    return await generate_couplet(body, settings, client)


# ---------------------------------------------------------
# 🎨 포스터 생성
# ---------------------------------------------------------
@router.post(
    "/poster",
    response_model=PosterResponse,
    responses=ERROR_RESPONSES,
    summary="春联海报生成",
    description="생성된 춘련과 主题/风格으로 이미지 모델을 호출해 세로형 포스터를 만듭니다. base64 또는 URL 반환.",
)
async def create_poster(
    body: Any = Depends(json_body),
    settings: Settings = Depends(get_settings),
    client: AsyncOpenAI = Depends(get_client),
):
    return await generate_poster(body, settings, client)
