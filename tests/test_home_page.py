"""
Streamlit 화면 렌더링 테스트 (streamlit.testing AppTest)
"""
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

FRONTEND_DIR = Path(__file__).resolve().parent.parent / "frontend"


@pytest.fixture
def app(monkeypatch):
    # Home.py 는 같은 폴더의 couplet_client 를 직접 import
    monkeypatch.syspath_prepend(str(FRONTEND_DIR))
    return AppTest.from_file(str(FRONTEND_DIR / "Home.py"), default_timeout=30)


@pytest.mark.unit
class TestHomePage:
    """결과/포스터 표시"""

    def test_initial_render(self, app):
        app.run()

        assert not app.exception
        assert app.button[0].disabled  # 主题 비어 있으면 생성 불가

    def test_result_and_poster_render_without_warnings(self, app):
        app.session_state["result"] = {
            "topLine": "春回大地千山秀",
            "bottomLine": "福满人间万户欢",
            "horizontal": "新年快乐",
            "explanation": "点题。",
            "styleTags": ["喜庆"],
        }
        app.session_state["poster_src"] = "https://img.test/p.png"
        app.run()

        assert not app.exception
        # 폐기 예정 인자 사용 시 화면에 경고가 표시됨
        assert not app.warning
        assert [b.label for b in app.button][-2:] == ["📋 复制结果", "🎨 生成海报"]
