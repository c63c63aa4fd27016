# backend/main.py
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from openai import AsyncOpenAI
from urllib.parse import urlparse

from backend.config import Settings
from backend.routers import couplet
from utils.openai_utils import build_client

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    if not settings.has_token:
        logger.warning("AI_BUILDER_TOKEN 미설정: 생성 요청은 500 으로 응답합니다.")

    app = FastAPI(title="Chunlian API", version="1.0")

    # --- 설정/클라이언트 (읽기 전용) ---
    app.state.settings = settings
    app.state.client = client or build_client(settings)

    # --- CORS ---
    _front = urlparse(settings.frontend_url)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[f"{_front.scheme}://{_front.netloc}"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- 라우터 등록 ---
    app.include_router(couplet.router)

    @app.get("/health")
    def health_check():
        """서버 상태 + 사용 중인 모델 (자격 증명 값은 노출하지 않음)"""
        return {
            "status": "healthy",
            "provider": settings.provider,
            "textModel": settings.text_model,
            "imageModel": settings.image_model,
            "timeoutMs": settings.timeout_ms,
            "configured": settings.has_token,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
