# backend/services/poster_service.py
from typing import Any

from fastapi.responses import JSONResponse
from openai import AsyncOpenAI

from backend.config import Settings
from backend.models.parse_result import ParseError, ParseOk, ParseResult
from backend.models.poster_model import PosterImage, PosterRequest
from backend.services.api_log import ApiCall, UpstreamMessages, run_upstream
from utils.openai_utils import call_with_timeout

POSTER_SIZE = "1024x1536"  # 세로 2:3
DEFAULT_POSTER_STYLE = "喜庆、年味、国风"
REQUIRED_FIELDS = ("theme", "topLine", "bottomLine", "horizontal")

MESSAGES = UpstreamMessages(
    http_error="海报服务暂时不可用（HTTP {status}）。请稍后重试。",
    timeout="海报生成超时（>{seconds} 秒），请稍后重试。",
    network_error="调用海报服务失败，请检查网络后重试。",
)


# ---------------------------------------------------------
# 요청 검증
# ---------------------------------------------------------
def parse_poster_request(payload: Any) -> ParseResult:
    if not isinstance(payload, dict):
        return ParseError("请求体必须是 JSON 对象")

    for field in REQUIRED_FIELDS:
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            return ParseError(f"{field} 不能为空")

    style = payload.get("style")
    return ParseOk(PosterRequest(
        theme=payload["theme"].strip(),
        topLine=payload["topLine"].strip(),
        bottomLine=payload["bottomLine"].strip(),
        horizontal=payload["horizontal"].strip(),
        style=style.strip() if isinstance(style, str) else None,
    ))


# ---------------------------------------------------------
# 프롬프트 (레이아웃 지시 고정)
# ---------------------------------------------------------
def build_poster_prompt(req: PosterRequest) -> str:
    return "\n".join([
        "请生成一张中国春节对联主题海报（竖版 2:3 比例）。",
        f"主题：{req.theme}",
        f"风格：{req.style or DEFAULT_POSTER_STYLE}",
        f"横批：{req.horizontal}",
        f"上联：{req.topLine}",
        f"下联：{req.bottomLine}",
        "布局要求：",
        "- 横批位于画面上方居中位置，距离顶部边缘留有充足的装饰空白，确保横批文字完整显示不被裁切。",
        "- 上联在画面右侧竖排书写，下联在画面左侧竖排书写，符合传统对联从右到左的阅读顺序。",
        "- 所有文字（横批、上联、下联）必须完整处于画面安全区域内，距离图片四边至少保留 8% 的边距。",
        "画面要求：红金主色调，传统中国风装饰纹样，文字清晰可读，适合社交分享封面。",
    ])


def _first_image(resp: Any) -> PosterImage:
    data = getattr(resp, "data", None) or []
    if not data:
        return PosterImage()
    first = data[0]
    b64 = getattr(first, "b64_json", None)
    url = getattr(first, "url", None)
    return PosterImage(
        imageBase64=b64 if isinstance(b64, str) and b64 else None,
        imageUrl=url if isinstance(url, str) and url else None,
    )


# ---------------------------------------------------------
# 포스터 이미지 생성
# ---------------------------------------------------------
async def generate_poster(payload: Any, settings: Settings, client: AsyncOpenAI) -> JSONResponse:
    call = ApiCall()

    async def _invoke(req: PosterRequest) -> JSONResponse:
        resp = await call_with_timeout(
            client.images.generate,
            settings.timeout_ms,
            model=settings.image_model,
            prompt=build_poster_prompt(req),
            size=POSTER_SIZE,
        )

        image = _first_image(resp)
        if not image.imageBase64 and not image.imageUrl:
            return call.fail(502, "UpstreamEmptyImage", "海报生成结果为空，请稍后重试。")

        return call.reply(200, {
            "data": image.model_dump(exclude_none=True),
            "provider": settings.provider,
            "model": settings.image_model,
        })

    return await run_upstream(call, settings, parse_poster_request(payload), MESSAGES, _invoke)
