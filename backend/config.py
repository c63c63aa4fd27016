# backend/config.py
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from utils.openai_utils import resolve_timeout_ms

DEFAULT_BASE_URL = "https://space.ai-builders.com/backend/v1"
DEFAULT_TEXT_MODEL = "supermind-agent-v1"
DEFAULT_IMAGE_MODEL = "gpt-image-1.5"
PROVIDER_NAME = "ai-builder"


@dataclass(frozen=True)
class Settings:
    """프로세스 시작 시 한 번 만들고 이후엔 읽기 전용"""
    token: Optional[str]
    base_url: str = DEFAULT_BASE_URL
    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    timeout_ms: int = resolve_timeout_ms(None)
    frontend_url: str = "http://localhost:8501"
    provider: str = PROVIDER_NAME

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    @classmethod
    def from_env(cls) -> "Settings":
        # --- 환경 변수 로드 ---
        load_dotenv()
        token = (os.getenv("AI_BUILDER_TOKEN") or "").strip()
        return cls(
            token=token or None,
            base_url=os.getenv("AI_BUILDER_BASE_URL", DEFAULT_BASE_URL),
            text_model=os.getenv("AI_BUILDER_MODEL", DEFAULT_TEXT_MODEL),
            image_model=os.getenv("AI_BUILDER_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
            timeout_ms=resolve_timeout_ms(os.getenv("AI_BUILDER_TIMEOUT_MS")),
            frontend_url=os.getenv("FRONTEND_URL", "http://localhost:8501"),
        )
