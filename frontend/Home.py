# 춘련(春联) 생성 화면. 입력 → /api/couplet/generate → 결과 표시 → (선택) /api/couplet/poster → 포스터 표시/다운로드.

# frontend/Home.py
import requests
import streamlit as st

from couplet_client import (
    ApiError,
    format_copy_text, generate_couplet, generate_poster, poster_bytes, poster_filename,
)

st.set_page_config(page_title="AI 春联生成", page_icon="🧧", layout="centered")
st.title("🧧 AI 春联生成")

# -----------------------------
# 세션 상태 초기화 (새로고침 시 사라짐)
# -----------------------------
DEFAULTS = {
    "theme": "",
    "style": "喜庆",
    "industry": "通用",
    "tone": "大气",
    "taboo_words": "",
    "loading": False,
    "poster_loading": False,
    "result": None,
    "poster_src": None,
    "poster_bytes": None,
    "error": None,
    "poster_error": None,
    "copy_message": None,
}
for k, v in DEFAULTS.items():
    st.session_state.setdefault(k, v)

ss = st.session_state
busy = ss.loading or ss.poster_loading


def _form() -> dict:
    return {
        "theme": ss.theme,
        "style": ss.style,
        "industry": ss.industry,
        "tone": ss.tone,
        "tabooWords": ss.taboo_words,
    }


def _start_couplet():
    ss.loading = True
    ss.error = None
    ss.copy_message = None


def _copy_result():
    ss.copy_message = "已生成复制文本，点击右上角按钮复制 ✓"


def _start_poster():
    ss.poster_loading = True
    ss.poster_error = None
    ss.copy_message = None


# -----------------------------
# 입력
# -----------------------------
st.text_input("主题", key="theme", max_chars=50, placeholder="例：新年快乐、阖家幸福", disabled=busy)
col1, col2, col3 = st.columns(3)
with col1:
    st.text_input("风格", key="style", disabled=busy)
with col2:
    st.text_input("行业", key="industry", disabled=busy)
with col3:
    st.text_input("语气", key="tone", disabled=busy)
st.text_input("禁忌词（可选，用逗号或顿号分隔）", key="taboo_words", disabled=busy)

can_submit = bool(ss.theme.strip()) and not busy
st.button("✨ 生成春联", type="primary", disabled=not can_submit, on_click=_start_couplet)

# -----------------------------
# 춘련 생성 요청
# -----------------------------
if ss.loading:
    with st.spinner("构思上联与下联…"):
        try:
            ss.result = generate_couplet(_form())
            ss.poster_src = None
            ss.poster_bytes = None
            ss.poster_error = None
        except ApiError as e:
            ss.error = str(e)
            ss.result = None
        finally:
            ss.loading = False
    st.rerun()

if ss.error:
    st.error(ss.error)

# -----------------------------
# 결과 표시
# -----------------------------
result = ss.result
if result:
    st.divider()
    st.markdown(f"<h2 style='text-align:center;'>{result['horizontal']}</h2>", unsafe_allow_html=True)
    right, left = st.columns(2)
    with right:
        st.markdown(f"**上联**　{result['topLine']}")
    with left:
        st.markdown(f"**下联**　{result['bottomLine']}")
    st.caption(result["explanation"])
    if result.get("styleTags"):
        st.write(" ".join(f"`{t}`" for t in result["styleTags"]))

    c1, c2 = st.columns(2)
    with c1:
        st.button("📋 复制结果", disabled=busy, on_click=_copy_result, width="stretch")
    with c2:
        st.button("🎨 生成海报", disabled=busy, on_click=_start_poster, width="stretch")

    if ss.copy_message:
        # 브라우저 클립보드는 code 블록의 복사 버튼 사용
        st.code(format_copy_text(result), language=None)
        st.caption(ss.copy_message)

# -----------------------------
# 포스터 생성 요청
# -----------------------------
if ss.poster_loading:
    with st.spinner("AI 正在绘制春联海报…"):
        try:
            ss.poster_src = generate_poster(_form(), ss.result)
            try:
                ss.poster_bytes = poster_bytes(ss.poster_src)
            except (requests.RequestException, ValueError):
                # URL 다운로드 실패 시 이미지 표시만 하고 다운로드 버튼은 숨김
                ss.poster_bytes = None
        except ApiError as e:
            ss.poster_error = str(e)
        finally:
            ss.poster_loading = False
    st.rerun()

if ss.poster_error:
    st.error(ss.poster_error)

if ss.poster_src:
    st.image(ss.poster_bytes or ss.poster_src, caption="春联海报", width="stretch")
    if ss.poster_bytes:
        st.download_button(
            "📥 下载海报",
            data=ss.poster_bytes,
            file_name=poster_filename(),
            mime="image/png",
            disabled=busy,
        )
