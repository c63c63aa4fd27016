from pydantic import BaseModel, Field
from typing import Optional


class PosterRequest(BaseModel):
    theme: str = Field(..., description="主题")
    topLine: str = Field(..., description="上联")
    bottomLine: str = Field(..., description="下联")
    horizontal: str = Field(..., description="横批")
    style: Optional[str] = Field(None, description="风格 (선택)")


class PosterImage(BaseModel):
    imageBase64: Optional[str] = None
    imageUrl: Optional[str] = None


class PosterResponse(BaseModel):
    requestId: str
    data: PosterImage
    provider: str
    model: str
