from pydantic import BaseModel, Field
from typing import List, Optional


class GenerateCoupletRequest(BaseModel):
    # 정규화가 끝난 요청 (검증은 couplet_service.parse_generate_request)
    theme: str = Field(..., description="主题 (1~50자)")
    style: str = Field("喜庆", description="风格")
    industry: str = Field("通用", description="行业")
    tone: str = Field("吉祥", description="语气")
    tabooWords: Optional[List[str]] = Field(None, description="禁忌词 (최대 20개)")


class CoupletResult(BaseModel):
    topLine: str
    bottomLine: str
    horizontal: str
    explanation: str
    styleTags: List[str] = Field(default_factory=list)


class CoupletGenerateResponse(BaseModel):
    requestId: str
    data: CoupletResult
    provider: str
    model: str


class ErrorResponse(BaseModel):
    requestId: str
    error: str
