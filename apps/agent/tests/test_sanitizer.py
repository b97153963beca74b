"""Unit tests for model reply decoding."""

from helper.sanitizer import decode_json, decode_json_array, decode_json_object, strip_code_fences


class TestStripCodeFences:
    def test_removes_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_removes_bare_fence_and_whitespace(self):
        assert strip_code_fences("  ```\nhello\n```  ") == "hello"

    def test_empty_input(self):
        assert strip_code_fences(None) == ""
        assert strip_code_fences("") == ""


class TestDecodeJson:
    def test_decodes_fenced_object(self):
        result = decode_json_object('```JSON\n{"valid": true}\n```')
        assert result.ok
        assert result.value == {"valid": True}

    def test_empty_reply_fails(self):
        result = decode_json("   ")
        assert not result.ok
        assert result.error == "empty response"

    def test_no_repair_of_trailing_commas(self):
        result = decode_json('{"a": 1,}')
        assert not result.ok
        assert result.error.startswith("invalid JSON")

    def test_prose_around_json_fails(self):
        assert not decode_json('Sure! {"a": 1}').ok

    def test_object_expected(self):
        result = decode_json_object("[1, 2]")
        assert not result.ok
        assert "list" in result.error

    def test_array_expected(self):
        result = decode_json_array('{"a": 1}')
        assert not result.ok
        assert decode_json_array('["x", "y"]').value == ["x", "y"]
