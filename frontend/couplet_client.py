# 백엔드 /api/couplet/* 호출 + 화면 표시용 변환 (Home.py 에서 사용)

# frontend/couplet_client.py
import base64, os, time
from typing import Any, Dict, Optional

import requests

BACKEND_URL = os.getenv("BACKEND_URL", "http://127.0.0.1:8000")
TIMEOUT_POST = 60  # 백엔드 최대 타임아웃(40초)보다 길게
TIMEOUT_GET = 30

NETWORK_ERROR = "网络或服务异常，请稍后重试。"
GENERATE_FALLBACK = "生成失败，请稍后再试。"
POSTER_FALLBACK = "海报生成失败，请稍后重试。"


class ApiError(RuntimeError):
    """화면에 그대로 보여줄 메시지를 담는 예외"""


# ------------------------
# 오류 메시지 조합
# ------------------------
def compose_error(payload: Any, fallback: str) -> str:
    if not isinstance(payload, dict):
        return fallback
    error = payload.get("error")
    message = error if isinstance(error, str) and error else fallback
    request_id = payload.get("requestId")
    if isinstance(request_id, str) and request_id:
        return f"{message}（请求编号：{request_id}）"
    return message


def _post(path: str, body: Dict[str, Any], fallback: str) -> Any:
    try:
        r = requests.post(f"{BACKEND_URL}{path}", json=body, timeout=TIMEOUT_POST)
    except requests.RequestException as e:
        raise ApiError(NETWORK_ERROR) from e

    try:
        payload = r.json()
    except ValueError:
        payload = None

    if not r.ok:
        raise ApiError(compose_error(payload, fallback))
    return payload


# ------------------------
# 백엔드 호출 함수
# ------------------------
def generate_couplet(form: Dict[str, str]) -> Dict[str, Any]:
    payload = _post("/api/couplet/generate", form, GENERATE_FALLBACK)
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise ApiError("生成结果解析失败，请稍后重试。")
    return data


def generate_poster(form: Dict[str, str], result: Dict[str, Any]) -> str:
    body = {
        "theme": form.get("theme", ""),
        "style": form.get("style", ""),
        "topLine": result["topLine"],
        "bottomLine": result["bottomLine"],
        "horizontal": result["horizontal"],
    }
    payload = _post("/api/couplet/poster", body, POSTER_FALLBACK)
    data = payload.get("data") if isinstance(payload, dict) else None
    src = poster_src(data)
    if not src:
        raise ApiError("海报生成成功，但未返回图片，请稍后重试。")
    return src


# ------------------------
# 표시용 변환
# ------------------------
def poster_src(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    b64 = data.get("imageBase64")
    if isinstance(b64, str) and b64:
        return f"data:image/png;base64,{b64}"
    url = data.get("imageUrl")
    if isinstance(url, str) and url:
        return url
    return None


def format_copy_text(result: Dict[str, Any]) -> str:
    return "\n".join([
        f"上联：{result['topLine']}",
        f"下联：{result['bottomLine']}",
        f"横批：{result['horizontal']}",
        f"解释：{result['explanation']}",
        f"风格标签：{'、'.join(result.get('styleTags') or [])}",
    ])


def poster_filename(now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"chunlian-poster-{now_ms}.png"


def poster_bytes(src: str) -> bytes:
    """data URL 은 디코딩, 원격 URL 은 내려받기"""
    if src.startswith("data:"):
        return base64.b64decode(src.split(",", 1)[1])
    r = requests.get(src, timeout=TIMEOUT_GET)
    r.raise_for_status()
    return r.content
