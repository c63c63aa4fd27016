# backend/services/couplet_service.py
import json, re
from typing import Any, List, Optional

from fastapi.responses import JSONResponse
from openai import AsyncOpenAI

from backend.config import Settings
from backend.models.couplet_model import CoupletResult, GenerateCoupletRequest
from backend.models.parse_result import ParseError, ParseOk, ParseResult
from backend.services.api_log import ApiCall, UpstreamMessages, run_upstream
from utils.openai_utils import call_with_timeout, extract_json_block

MAX_THEME_LENGTH = 50
MAX_TABOO_WORDS = 20
TABOO_SPLIT = re.compile(r"[，,、]")
REQUIRED_OUTPUT_FIELDS = ("topLine", "bottomLine", "horizontal", "explanation")

SYSTEM_PROMPT = "你是资深春联撰写助手。输出时仅返回 JSON，要求语言工整、吉祥，避免低俗内容。"

MESSAGES = UpstreamMessages(
    http_error="上游服务暂时不可用（HTTP {status}）。请稍后重试。",
    timeout="生成请求超时（>{seconds} 秒），请稍后重试。",
    network_error="调用上游服务失败，请检查网络后重试。",
)


# ---------------------------------------------------------
# 입력 정규화
# ---------------------------------------------------------
def as_trimmed_string(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_taboo_words(value: Any) -> Optional[List[str]]:
    if isinstance(value, list):
        words = [as_trimmed_string(item) for item in value]
        return [w for w in words if w][:MAX_TABOO_WORDS]

    if isinstance(value, str):
        words = [w.strip() for w in TABOO_SPLIT.split(value)]
        words = [w for w in words if w][:MAX_TABOO_WORDS]
        return words or None

    return None


def parse_generate_request(payload: Any) -> ParseResult:
    if not isinstance(payload, dict):
        return ParseError("请求体必须为 JSON 对象")

    theme = as_trimmed_string(payload.get("theme"))
    if not theme:
        return ParseError("theme 不能为空")
    if len(theme) > MAX_THEME_LENGTH:
        return ParseError(f"theme 过长，请控制在 {MAX_THEME_LENGTH} 字以内")

    return ParseOk(GenerateCoupletRequest(
        theme=theme,
        style=as_trimmed_string(payload.get("style")) or "喜庆",
        industry=as_trimmed_string(payload.get("industry")) or "通用",
        tone=as_trimmed_string(payload.get("tone")) or "吉祥",
        tabooWords=normalize_taboo_words(payload.get("tabooWords")),
    ))


# ---------------------------------------------------------
# 모델 출력 파싱
# ---------------------------------------------------------
def parse_model_couplet_output(raw: str) -> ParseResult:
    try:
        parsed = json.loads(extract_json_block(raw))
    except ValueError:
        return ParseError("模型返回不是合法 JSON")
    if not isinstance(parsed, dict):
        return ParseError("模型返回不是合法 JSON")

    fields = {name: as_trimmed_string(parsed.get(name)) for name in REQUIRED_OUTPUT_FIELDS}
    if not all(fields.values()):
        return ParseError("模型返回字段不完整")

    tags = parsed.get("styleTags")
    style_tags = [t for t in (as_trimmed_string(x) for x in tags) if t] if isinstance(tags, list) else []

    return ParseOk(CoupletResult(**fields, styleTags=style_tags))


# ---------------------------------------------------------
# 프롬프트
# ---------------------------------------------------------
def build_user_prompt(req: GenerateCoupletRequest) -> str:
    taboo = "、".join(req.tabooWords) if req.tabooWords else "无"
    return "\n".join([
        f"主题：{req.theme}",
        f"风格：{req.style}",
        f"行业：{req.industry}",
        f"语气：{req.tone}",
        f"禁忌词：{taboo}",
        "请严格输出 JSON，不要输出 markdown 代码块，不要额外说明。",
        "JSON schema: { topLine: string, bottomLine: string, horizontal: string, explanation: string, styleTags: string[] }",
    ])


def _message_content(resp: Any) -> str:
    choices = getattr(resp, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content if isinstance(content, str) else ""


# ---------------------------------------------------------
# 춘련 생성
# ---------------------------------------------------------
async def generate_couplet(payload: Any, settings: Settings, client: AsyncOpenAI) -> JSONResponse:
    call = ApiCall()

    async def _invoke(req: GenerateCoupletRequest) -> JSONResponse:
        resp = await call_with_timeout(
            client.chat.completions.create,
            settings.timeout_ms,
            model=settings.text_model,
            temperature=0.8,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(req)},
            ],
        )

        content = _message_content(resp)
        if not content:
            return call.fail(502, "UpstreamEmptyContent", "生成结果为空，请稍后重试。")

        result = parse_model_couplet_output(content)
        if not result.ok:
            return call.fail(502, "ModelOutputParseError", f"{result.error}，请稍后重试。")

        return call.reply(200, {
            "data": result.data.model_dump(),
            "provider": settings.provider,
            "model": settings.text_model,
        })

    return await run_upstream(call, settings, parse_generate_request(payload), MESSAGES, _invoke)
