import base64
import json

import pytest

import pipeline
from pipeline import (
    INVALID_ENCODING_MESSAGE,
    INVALID_JSON_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    Empty,
    ErrorKind,
    Failure,
    InvalidEncodingError,
    InvalidJsonError,
    Success,
    decode_base64,
    format_json,
    run_pipeline,
)


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class TestDecodeBase64:
    def test_decodes_standard_base64(self) -> None:
        assert decode_base64("aGVsbG8gd29ybGQ=") == "hello world"

    def test_ignores_ascii_whitespace(self) -> None:
        encoded = _b64('{"name":"John Doe","age":30}')
        wrapped = "\n".join(encoded[i:i + 8] for i in range(0, len(encoded), 8))

        assert decode_base64(f"  {wrapped}\t\r\n") == '{"name":"John Doe","age":30}'

    def test_padding_is_optional(self) -> None:
        assert decode_base64("eyJhIjoxfQ") == '{"a":1}'

    def test_single_padding_character_is_removed(self) -> None:
        assert decode_base64("YWI=") == "ab"

    def test_rejects_characters_outside_alphabet(self) -> None:
        with pytest.raises(InvalidEncodingError):
            decode_base64("!!!not-base64!!!")

    def test_rejects_url_safe_alphabet(self) -> None:
        with pytest.raises(InvalidEncodingError):
            decode_base64("ab-_")

    def test_rejects_impossible_length(self) -> None:
        with pytest.raises(InvalidEncodingError):
            decode_base64("eyJhI")

    def test_rejects_padding_on_unaligned_input(self) -> None:
        with pytest.raises(InvalidEncodingError):
            decode_base64("YQ=")

    def test_rejects_padding_in_the_middle(self) -> None:
        with pytest.raises(InvalidEncodingError):
            decode_base64("YQ==YQ==")

    def test_non_utf8_bytes_are_not_json(self) -> None:
        with pytest.raises(InvalidJsonError):
            decode_base64("//4=")

    def test_decodes_utf8_text(self) -> None:
        assert decode_base64(_b64("Zoë")) == "Zoë"


class TestFormatJson:
    def test_indents_with_two_spaces(self) -> None:
        assert format_json('{"a":[1,2]}') == '{\n  "a": [\n    1,\n    2\n  ]\n}'

    def test_preserves_key_order(self) -> None:
        assert format_json('{"b":1,"a":2}') == '{\n  "b": 1,\n  "a": 2\n}'

    @pytest.mark.parametrize(
        "text, expected",
        [
            ('"42"', '"42"'),
            ("null", "null"),
            ("true", "true"),
            (" 3 ", "3"),
            ("[]", "[]"),
            ("{}", "{}"),
        ],
    )
    def test_formats_scalars_and_empty_containers(self, text: str, expected: str) -> None:
        assert format_json(text) == expected

    def test_keeps_non_ascii_characters(self) -> None:
        assert format_json('{"name":"Zoë"}') == '{\n  "name": "Zoë"\n}'

    @pytest.mark.parametrize("number", ["1e400", "-1e400", "1E+999"])
    def test_out_of_range_numbers_print_as_null(self, number: str) -> None:
        output = format_json(f'{{"x": {number}, "y": [{number}]}}')

        assert output == '{\n  "x": null,\n  "y": [\n    null\n  ]\n}'
        json.loads(output, parse_constant=lambda name: pytest.fail(f"emitted {name}"))

    def test_integer_past_digit_limit_prints_as_null(self) -> None:
        assert format_json("1" * 5000) == "null"

    def test_large_integer_within_digit_limit_stays_exact(self) -> None:
        digits = "9" * 400

        assert format_json(digits) == digits

    def test_duplicate_keys_keep_last_value(self) -> None:
        assert format_json('{"a":1,"b":2,"a":3}') == '{\n  "a": 3,\n  "b": 2\n}'

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "not json", '{"a":1} x', '{"a":1', "[1,2", "tru", "NaN", "-Infinity", "{'a':1}"],
    )
    def test_rejects_invalid_documents(self, text: str) -> None:
        with pytest.raises(InvalidJsonError):
            format_json(text)


class TestRunPipeline:
    @pytest.mark.parametrize("raw", ["", "   ", "\n\t "])
    def test_blank_input_is_empty(self, raw: str) -> None:
        assert run_pipeline(raw) == Empty()

    def test_invalid_base64(self) -> None:
        assert run_pipeline("!!!not-base64!!!") == Failure(
            ErrorKind.INVALID_ENCODING, INVALID_ENCODING_MESSAGE
        )

    def test_valid_base64_invalid_json(self) -> None:
        assert run_pipeline(_b64("not json")) == Failure(
            ErrorKind.INVALID_JSON, INVALID_JSON_MESSAGE
        )

    def test_decoded_whitespace_is_invalid_json(self) -> None:
        assert run_pipeline(_b64(" ")) == Failure(ErrorKind.INVALID_JSON, INVALID_JSON_MESSAGE)

    def test_valid_end_to_end(self) -> None:
        result = run_pipeline(_b64('{"name":"John Doe","age":30}'))

        assert result == Success('{\n  "name": "John Doe",\n  "age": 30\n}')

    def test_example_from_input_hint(self) -> None:
        result = run_pipeline("eyJuYW1lIjogIkpvaG4gRG9lIiwgImFnZSI6IDMwfQ==")

        assert result == Success('{\n  "name": "John Doe",\n  "age": 30\n}')

    def test_unexpected_error_uses_its_message(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _boom(text: str) -> str:
            raise RuntimeError("boom")

        monkeypatch.setattr(pipeline, "format_json", _boom)

        assert run_pipeline(_b64("{}")) == Failure(ErrorKind.UNKNOWN, "boom")

    def test_unexpected_error_without_message(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _boom(text: str) -> str:
            raise RuntimeError()

        monkeypatch.setattr(pipeline, "format_json", _boom)

        assert run_pipeline(_b64("{}")) == Failure(ErrorKind.UNKNOWN, UNKNOWN_ERROR_MESSAGE)

    def test_deeply_nested_document_is_reported_not_raised(self) -> None:
        result = run_pipeline(_b64("[" * 100000 + "]" * 100000))

        assert isinstance(result, Failure)
        assert result.message

    def test_overflowing_number_gives_valid_json(self) -> None:
        result = run_pipeline(_b64('{"x": 1e400}'))

        assert result == Success('{\n  "x": null\n}')

    def test_huge_integer_is_not_an_interpreter_error(self) -> None:
        assert run_pipeline(_b64("1" * 5000)) == Success("null")

    def test_is_idempotent(self) -> None:
        raw = _b64('{"a":[1,{"b":null}]}')

        assert run_pipeline(raw) == run_pipeline(raw)
        assert run_pipeline("%%%") == run_pipeline("%%%")


class TestRoundTrip:
    @pytest.mark.parametrize(
        "value",
        [
            {"name": "John Doe", "age": 30},
            [1, 2.5, "three", None, True, False],
            {"nested": {"list": [{"x": 1}, []], "empty": {}}},
            {"z": 1, "a": 2, "m": 3},
            "just a string",
            0,
            None,
            {"unicode": "日本語 ✓"},
        ],
    )
    def test_compact_json_comes_back_indented(self, value) -> None:
        result = run_pipeline(_b64(json.dumps(value, separators=(",", ":"), ensure_ascii=False)))

        assert isinstance(result, Success)
        assert result.output == json.dumps(value, indent=2, ensure_ascii=False)
        assert json.loads(result.output) == value
