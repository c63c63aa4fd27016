# backend/services/api_log.py
# 요청 ID 발급 + 소요 시간 측정 + 결과 1회 로깅 + 공통 오류 매핑 (두 엔드포인트 공용 골격)
import json, logging, time, uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi.responses import JSONResponse

from backend.config import Settings
from backend.models.parse_result import ParseResult
from utils.openai_utils import UpstreamHTTPError, UpstreamTimeoutError

logger = logging.getLogger(__name__)

CONFIG_MISSING_MESSAGE = "服务暂时不可用（配置缺失）。请联系管理员后重试。"


@dataclass(frozen=True)
class UpstreamMessages:
    http_error: str    # {status}
    timeout: str       # {seconds}
    network_error: str


class ApiCall:
    def __init__(self):
        self.request_id = str(uuid.uuid4())
        self._started = time.perf_counter()
        self._logged = False

    def finish(self, status_code: int, error_type: Optional[str] = None) -> None:
        if self._logged:
            return
        self._logged = True
        logger.info(json.dumps({
            "requestId": self.request_id,
            "durationMs": int((time.perf_counter() - self._started) * 1000),
            "statusCode": status_code,
            "errorType": error_type,
        }, ensure_ascii=False))

    def reply(self, status_code: int, content: Dict[str, Any], error_type: Optional[str] = None) -> JSONResponse:
        self.finish(status_code, error_type)
        return JSONResponse(status_code=status_code, content={"requestId": self.request_id, **content})

    def fail(self, status_code: int, error_type: str, message: str) -> JSONResponse:
        return self.reply(status_code, {"error": message}, error_type)


async def run_upstream(
    call: ApiCall,
    settings: Settings,
    parsed: ParseResult,
    messages: UpstreamMessages,
    invoke: Callable[[Any], Awaitable[JSONResponse]],
) -> JSONResponse:
    """
    검증 → 자격 증명 확인 → 업스트림 호출(invoke) → 예외를 상태 코드로 변환.
    invoke 는 성공/빈 결과/파싱 실패 응답을 직접 만든다.
    """
    if not parsed.ok:
        return call.fail(400, "ValidationError", f"请求参数有误：{parsed.error}。请检查后重试。")

    if not settings.has_token:
        return call.fail(500, "ServerConfigError", CONFIG_MISSING_MESSAGE)

    try:
        return await invoke(parsed.data)
    except UpstreamTimeoutError as e:
        logger.warning("upstream timeout after %s ms (requestId=%s)", e.timeout_ms, call.request_id)
        return call.fail(504, "UpstreamTimeout", messages.timeout.format(seconds=e.timeout_ms // 1000))
    except UpstreamHTTPError as e:
        logger.warning("upstream HTTP %s (requestId=%s)", e.status_code, call.request_id)
        return call.fail(502, "UpstreamError", messages.http_error.format(status=e.status_code))
    except Exception as e:
        # 서버 로그에는 스택추적 남기고, 클라이언트엔 고정 메시지 전달
        logger.exception("upstream call failed (requestId=%s): %s", call.request_id, e)
        return call.fail(502, "NetworkOrServiceError", messages.network_error)
