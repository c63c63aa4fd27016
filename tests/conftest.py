"""
Pytest 설정 및 공통 Fixtures
"""
import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from backend.config import Settings
from backend.main import create_app
from utils.openai_utils import build_client


class UpstreamStub:
    """httpx.MockTransport 핸들러 - 업스트림 요청 기록 + 응답 흉내"""

    def __init__(self):
        self.requests = []
        self.handler = lambda request: httpx.Response(500, json={"error": "no handler"})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def respond_json(self, payload, status_code: int = 200):
        self.handler = lambda request: httpx.Response(status_code, json=payload)

    def respond_chat(self, content):
        self.respond_json({"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]})

    def raise_timeout(self):
        def _handler(request):
            raise httpx.ReadTimeout("timed out", request=request)
        self.handler = _handler

    def stall(self, seconds: float):
        """응답 자체가 마감보다 늦게 도착"""
        async def _handler(request):
            await asyncio.sleep(seconds)
            return httpx.Response(200, json={"choices": []})
        self.handler = _handler

    def drip(self, body: bytes, interval: float):
        """헤더는 즉시, 본문은 1바이트씩 interval 간격으로 전송"""
        async def _chunks():
            for b in body:
                await asyncio.sleep(interval)
                yield bytes([b])
        self.handler = lambda request: httpx.Response(
            200, headers={"content-type": "application/json"}, content=_chunks(),
        )

    def raise_connect_error(self):
        def _handler(request):
            raise httpx.ConnectError("connection refused", request=request)
        self.handler = _handler

    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def settings():
    return Settings(token="test-token", base_url="https://upstream.test/v1")


@pytest.fixture
def make_client(upstream):
    """Settings 를 받아 업스트림이 스텁된 TestClient 생성"""
    def _make(s: Settings) -> TestClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
        return TestClient(create_app(s, build_client(s, http_client=http_client)))
    return _make


@pytest.fixture
def client(make_client, settings):
    """FastAPI 테스트 클라이언트"""
    return make_client(settings)


@pytest.fixture
def couplet_json():
    """모델이 돌려주는 정상 춘련 JSON"""
    return {
        "topLine": "春回大地千山秀",
        "bottomLine": "福满人间万户欢",
        "horizontal": "新年快乐",
        "explanation": "上联写春回大地，下联写福满人间，横批点题。",
        "styleTags": ["喜庆", "吉祥"],
    }


@pytest.fixture
def poster_request():
    return {
        "theme": "新年快乐",
        "style": "国风",
        "topLine": "春回大地千山秀",
        "bottomLine": "福满人间万户欢",
        "horizontal": "新年快乐",
    }
