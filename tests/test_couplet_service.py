"""
춘련 요청 검증 / 모델 출력 파싱 / 프롬프트 단위 테스트
"""
import json

import pytest

from backend.models.couplet_model import GenerateCoupletRequest
from backend.services.couplet_service import (
    build_user_prompt,
    normalize_taboo_words,
    parse_generate_request,
    parse_model_couplet_output,
)


@pytest.mark.unit
class TestGenerateRequestValidation:
    """요청 본문 검증"""

    @pytest.mark.parametrize("payload", [None, [], "theme", 3])
    def test_body_must_be_object(self, payload):
        result = parse_generate_request(payload)
        assert not result.ok
        assert result.error == "请求体必须为 JSON 对象"

    @pytest.mark.parametrize("payload", [{}, {"theme": ""}, {"theme": "   "}, {"theme": 123}])
    def test_missing_theme(self, payload):
        result = parse_generate_request(payload)
        assert not result.ok
        assert result.error == "theme 不能为空"

    def test_theme_too_long(self):
        result = parse_generate_request({"theme": "福" * 51})
        assert not result.ok
        assert result.error == "theme 过长，请控制在 50 字以内"

    def test_theme_at_limit_is_accepted(self):
        result = parse_generate_request({"theme": "福" * 50})
        assert result.ok

    def test_defaults_applied(self):
        result = parse_generate_request({"theme": " 新年快乐 "})
        assert result.ok
        data = result.data
        assert data.theme == "新年快乐"
        assert (data.style, data.industry, data.tone) == ("喜庆", "通用", "吉祥")
        assert data.tabooWords is None

    def test_blank_optionals_fall_back_to_defaults(self):
        result = parse_generate_request({"theme": "春", "style": "  ", "industry": None, "tone": 5})
        assert result.ok
        assert (result.data.style, result.data.industry, result.data.tone) == ("喜庆", "通用", "吉祥")

    def test_optionals_are_trimmed(self):
        result = parse_generate_request({"theme": "春", "style": " 典雅 ", "industry": " 餐饮 ", "tone": " 大气 "})
        assert (result.data.style, result.data.industry, result.data.tone) == ("典雅", "餐饮", "大气")


@pytest.mark.unit
class TestTabooWords:
    """禁忌词 정규화"""

    def test_string_with_mixed_delimiters(self):
        assert normalize_taboo_words("a,b，c、") == ["a", "b", "c"]

    def test_list_drops_blanks(self):
        assert normalize_taboo_words([" a ", "", "  ", "b", 7]) == ["a", "b"]

    def test_list_capped_at_twenty(self):
        assert len(normalize_taboo_words([f"w{i}" for i in range(30)])) == 20

    def test_string_capped_at_twenty(self):
        words = normalize_taboo_words(",".join(f"w{i}" for i in range(30)))
        assert words == [f"w{i}" for i in range(20)]

    def test_empty_string_is_absent(self):
        assert normalize_taboo_words(" ，, 、") is None

    def test_empty_list_stays_list(self):
        assert normalize_taboo_words([]) == []

    @pytest.mark.parametrize("value", [None, 3, {"a": 1}])
    def test_other_types_are_absent(self, value):
        assert normalize_taboo_words(value) is None


@pytest.mark.unit
class TestModelOutputParsing:
    """업스트림 모델 출력 파싱"""

    def test_fenced_json(self, couplet_json):
        raw = "```json\n" + json.dumps(couplet_json, ensure_ascii=False) + "\n```"
        result = parse_model_couplet_output(raw)
        assert result.ok
        assert result.data.topLine == couplet_json["topLine"]
        assert result.data.styleTags == ["喜庆", "吉祥"]

    def test_unfenced_json(self, couplet_json):
        result = parse_model_couplet_output("  " + json.dumps(couplet_json) + "\n")
        assert result.ok
        assert result.data.horizontal == "新年快乐"

    def test_not_json(self):
        result = parse_model_couplet_output("春回大地，福满人间")
        assert not result.ok
        assert result.error == "模型返回不是合法 JSON"

    def test_json_array_is_not_accepted(self):
        result = parse_model_couplet_output("[1, 2]")
        assert not result.ok
        assert result.error == "模型返回不是合法 JSON"

    @pytest.mark.parametrize("missing", ["topLine", "bottomLine", "horizontal", "explanation"])
    def test_incomplete_fields(self, couplet_json, missing):
        del couplet_json[missing]
        result = parse_model_couplet_output(json.dumps(couplet_json))
        assert not result.ok
        assert result.error == "模型返回字段不完整"

    def test_blank_field_is_incomplete(self, couplet_json):
        couplet_json["horizontal"] = "   "
        result = parse_model_couplet_output(json.dumps(couplet_json))
        assert result.error == "模型返回字段不完整"

    def test_fields_are_trimmed(self, couplet_json):
        couplet_json["topLine"] = "  春回大地千山秀  "
        result = parse_model_couplet_output(json.dumps(couplet_json))
        assert result.data.topLine == "春回大地千山秀"

    @pytest.mark.parametrize("tags", ["喜庆", None, 3, {"a": "b"}])
    def test_non_list_style_tags_become_empty(self, couplet_json, tags):
        couplet_json["styleTags"] = tags
        result = parse_model_couplet_output(json.dumps(couplet_json))
        assert result.ok
        assert result.data.styleTags == []

    def test_absent_style_tags_become_empty(self, couplet_json):
        del couplet_json["styleTags"]
        assert parse_model_couplet_output(json.dumps(couplet_json)).data.styleTags == []

    def test_style_tags_drop_blanks(self, couplet_json):
        couplet_json["styleTags"] = [" 喜庆 ", "", 1, "国风"]
        assert parse_model_couplet_output(json.dumps(couplet_json)).data.styleTags == ["喜庆", "国风"]


@pytest.mark.unit
class TestUserPrompt:
    """프롬프트 구성"""

    def test_prompt_embeds_fields(self):
        req = GenerateCoupletRequest(theme="龙年", style="典雅", industry="餐饮", tone="大气", tabooWords=["穷", "病"])
        prompt = build_user_prompt(req)
        lines = prompt.split("\n")
        assert lines[:5] == ["主题：龙年", "风格：典雅", "行业：餐饮", "语气：大气", "禁忌词：穷、病"]
        assert "不要输出 markdown 代码块" in prompt
        assert "styleTags: string[]" in prompt

    def test_prompt_without_taboo_words(self):
        prompt = build_user_prompt(GenerateCoupletRequest(theme="龙年"))
        assert "禁忌词：无" in prompt
