# utils/openai_utils.py
import asyncio, math, re
from typing import Any, Awaitable, Callable, Optional

import httpx
from openai import AsyncOpenAI, APIStatusError, APITimeoutError

# 타임아웃 범위 (ms)
MIN_TIMEOUT_MS = 25_000
MAX_TIMEOUT_MS = 40_000
DEFAULT_TIMEOUT_MS = 30_000


# -------------------- 예외 --------------------
class UpstreamCallError(Exception):
    """업스트림 호출 실패 (타임아웃 / HTTP 상태 오류)"""


class UpstreamTimeoutError(UpstreamCallError):
    def __init__(self, timeout_ms: int):
        super().__init__(f"upstream call exceeded {timeout_ms} ms")
        self.timeout_ms = timeout_ms


class UpstreamHTTPError(UpstreamCallError):
    def __init__(self, status_code: int):
        super().__init__(f"upstream returned HTTP {status_code}")
        self.status_code = status_code


# -------------------- 공통 유틸 --------------------
def resolve_timeout_ms(raw: Optional[str]) -> int:
    """
    AI_BUILDER_TIMEOUT_MS 값 → 실제 타임아웃(ms).
    미설정/숫자 아님 → 기본값, 그 외에는 반올림 후 [25000, 40000] 범위로 제한.
    """
    if raw is None or not str(raw).strip():
        return DEFAULT_TIMEOUT_MS
    try:
        parsed = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT_MS
    if not math.isfinite(parsed):
        return DEFAULT_TIMEOUT_MS

    rounded = int(math.floor(parsed + 0.5))
    if rounded < MIN_TIMEOUT_MS:
        return MIN_TIMEOUT_MS
    if rounded > MAX_TIMEOUT_MS:
        return MAX_TIMEOUT_MS
    return rounded


def build_client(settings, http_client: Optional[httpx.AsyncClient] = None) -> AsyncOpenAI:
    # 1회 시도, 재시도 없음
    return AsyncOpenAI(
        api_key=settings.token or "missing",
        base_url=settings.base_url,
        max_retries=0,
        http_client=http_client,
    )


# -------------------- OpenAI 호출 --------------------
async def call_with_timeout(fn: Callable[..., Awaitable[Any]], timeout_ms: int, **kwargs) -> Any:
    """
    업스트림 호출 전체(연결~본문 수신)를 하나의 마감 시간으로 제한.
    마감 시 asyncio.wait_for 가 호출을 취소하고, httpx 가 연결을 닫는다.
    - 타임아웃 → UpstreamTimeoutError
    - 2xx 아님 → UpstreamHTTPError
    - 그 외 예외는 그대로 전달 (호출 측에서 네트워크/서비스 오류로 분류)
    """
    seconds = timeout_ms / 1000
    try:
        return await asyncio.wait_for(fn(timeout=seconds, **kwargs), timeout=seconds)
    except (asyncio.TimeoutError, APITimeoutError) as e:
        raise UpstreamTimeoutError(timeout_ms) from e
    except APIStatusError as e:
        raise UpstreamHTTPError(e.status_code) from e


# -------------------- 출력 파싱 --------------------
def extract_json_block(raw: str) -> str:
    # ```json ... ``` 코드펜스 안 JSON 우선
    m = re.search(r"```(?:json)?\s*([\s\S]*?)```", raw, re.I)
    if m and m.group(1):
        return m.group(1).strip()
    return raw.strip()
