"""Tests for error message extraction from API responses."""

from dataclasses import dataclass

import pytest
from pytest_mock import MockerFixture

from clidispatch.errors import ApiResponse
from clidispatch.extraction import (
    DEFAULT_ERROR_MESSAGE,
    extract_error,
    parse_error_json,
    parse_error_plain,
    parse_error_xml,
)

DEEPLY_NESTED_JSON = '[' * 100_000 + ']' * 100_000


@dataclass
class ExtractCase:
    """Test case for extract_error."""

    body: ApiResponse | str | bytes | None
    expected: str


class TestExtractError:
    """Tests for the extraction fallback chain."""

    @pytest.mark.parametrize(
        'case',
        [
            ExtractCase(body='<errors><error>X</error></errors>', expected='X'),
            ExtractCase(
                body='<errors><error>Name is taken</error><error>Bad region</error></errors>',
                expected='Name is taken / Bad region',
            ),
            ExtractCase(body='[["base", "bad thing"]]', expected='bad thing'),
            ExtractCase(body='{"error": "nope"}', expected='nope'),
            ExtractCase(body=b'{"error": "from bytes"}', expected='from bytes'),
            ExtractCase(
                body=ApiResponse(status=422, body='{"error": "wrapped"}'),
                expected='wrapped',
            ),
            ExtractCase(
                body=ApiResponse(body='Something broke', headers={'Content-Type': 'text/plain; charset=utf-8'}),
                expected='Something broke',
            ),
            ExtractCase(
                body=ApiResponse(body='<html>oops</html>', headers={'Content-Type': 'text/html'}),
                expected=DEFAULT_ERROR_MESSAGE,
            ),
            ExtractCase(body='Something broke', expected=DEFAULT_ERROR_MESSAGE),
            ExtractCase(body='', expected=DEFAULT_ERROR_MESSAGE),
            ExtractCase(body=None, expected=DEFAULT_ERROR_MESSAGE),
        ],
    )
    def test_extract_error(self, case: ExtractCase) -> None:
        """Test that the first matching strategy supplies the message."""
        assert extract_error(case.body) == case.expected

    def test_default_message_string(self) -> None:
        """Test that a provided default replaces the generic message."""
        assert extract_error('garbage', 'Job not found') == 'Job not found'

    def test_default_callable_only_called_when_needed(self, mocker: MockerFixture) -> None:
        """Test that the default callback is lazy."""
        default = mocker.Mock(return_value='fallback')

        assert extract_error('{"error": "nope"}', default) == 'nope'
        default.assert_not_called()

        assert extract_error('garbage', default) == 'fallback'
        default.assert_called_once_with()

    def test_deeply_nested_body_falls_back(self) -> None:
        """Test that a decoder hitting the recursion limit degrades to the default."""
        assert extract_error(DEEPLY_NESTED_JSON) == DEFAULT_ERROR_MESSAGE
        assert extract_error(ApiResponse(body=DEEPLY_NESTED_JSON), 'Job not found') == 'Job not found'

    def test_xml_wins_over_text_plain(self) -> None:
        """Test that XML is tried before the plain-text body."""
        response = ApiResponse(
            body='<errors><error>X</error></errors>',
            headers={'content-type': 'text/plain'},
        )

        assert extract_error(response) == 'X'


class TestStrategies:
    """Tests for the individual decode strategies."""

    @pytest.mark.parametrize(
        'body',
        ['not xml', '<errors>', '<root><child/></root>', '<errors></errors>', '{"error": "x"}'],
    )
    def test_parse_error_xml_absent(self, body: str) -> None:
        """Test that non-matching XML yields no message."""
        assert parse_error_xml(body) is None

    def test_parse_error_xml_nested_errors(self) -> None:
        """Test that an errors element below the root is found."""
        body = '<response><errors><error>deep</error></errors></response>'

        assert parse_error_xml(body) == 'deep'

    @pytest.mark.parametrize(
        'body',
        ['[]', '[1]', '[[]]', '"just a string"', '42', '{"message": "x"}', '{"error": ""}', 'not json', '{'],
    )
    def test_parse_error_json_absent(self, body: str) -> None:
        """Test that unsupported or broken JSON yields no message."""
        assert parse_error_json(body) is None

    def test_parse_error_json_deeply_nested(self) -> None:
        """Test that a body too deep to decode yields no message."""
        assert parse_error_json(DEEPLY_NESTED_JSON) is None

    def test_parse_error_json_non_string_message(self) -> None:
        """Test that a non-string error value is rendered as text."""
        assert parse_error_json('{"error": 42}') == '42'

    def test_parse_error_plain_requires_response(self) -> None:
        """Test that a bare string has no content type to check."""
        assert parse_error_plain('Something broke') is None

    def test_parse_error_plain_header_case_insensitive(self) -> None:
        """Test that header names are matched regardless of case."""
        response = ApiResponse(body='down for maintenance', headers={'CONTENT_TYPE': 'text/plain'})

        assert parse_error_plain(response) == 'down for maintenance'
