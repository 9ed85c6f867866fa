"""Unit tests for the LeanSpec config parser."""

import pytest

from leanspec.config_parser import ConfigSyntaxError, ConfigToken, parse, parse_scalar, tokenize


class TestTokenize:
    """Test cases for tokenization."""

    def test_skips_blank_and_comment_lines(self):
        """Blank lines and comments never become tokens."""
        source = "# header comment\n\nname: demo\n  # indented comment\nother: 1\n"

        tokens = tokenize(source)

        assert tokens == [
            ConfigToken(indent=0, text="name: demo", line=3),
            ConfigToken(indent=0, text="other: 1", line=5),
        ]

    def test_records_indent_and_trimmed_text(self):
        tokens = tokenize("parent:\n  child: value   \n")

        assert tokens[1].indent == 2
        assert tokens[1].text == "child: value"
        assert tokens[1].line == 2

    def test_odd_indentation_is_rejected(self):
        with pytest.raises(ConfigSyntaxError) as excinfo:
            tokenize("parent:\n   child: 1\n")

        assert excinfo.value.line == 2
        assert "line 2" in str(excinfo.value)


class TestParseScalar:
    """Test cases for scalar decoding."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("~", None),
            ("null", None),
            ("true", True),
            ("false", False),
            ("42", 42),
            ("-7", -7),
            ("+3", 3),
            ("3.25", 3.25),
            ("'it''s'", "it's"),
            ('"line\\nbreak"', "line\nbreak"),
            ("plain text", "plain text"),
            ("2025-11-01", "2025-11-01"),
        ],
    )
    def test_decoding(self, text, expected):
        assert parse_scalar(text) == expected

    def test_integers_stay_integers(self):
        value = parse_scalar("42")

        assert isinstance(value, int)
        assert not isinstance(value, bool)

    def test_invalid_json_string_falls_back_to_interior(self):
        """A double-quoted string with a bad escape keeps its raw interior."""
        assert parse_scalar('"bad \\x escape"') == "bad \\x escape"

    def test_true_is_case_sensitive(self):
        assert parse_scalar("True") == "True"

    def test_only_ascii_digits_are_numbers(self):
        """Digits from other scripts are plain text, not numbers."""
        assert parse_scalar("\u0661\u0662") == "\u0661\u0662"
        assert parse("n: \u0661\u0662\n") == {"n": "\u0661\u0662"}
        assert parse_scalar("\uff11\uff10.5") == "\uff11\uff10.5"


class TestParseMappings:
    """Test cases for mapping documents."""

    def test_empty_document_is_empty_mapping(self):
        assert parse("") == {}
        assert parse("# only a comment\n\n") == {}

    def test_nested_mapping(self):
        source = (
            "name: demo\n"
            "structure:\n"
            "  defaultFile: README.md\n"
            "  sequenceDigits: 3\n"
            "autoCheck: false\n"
        )

        assert parse(source) == {
            "name": "demo",
            "structure": {"defaultFile": "README.md", "sequenceDigits": 3},
            "autoCheck": False,
        }

    def test_key_order_is_preserved(self):
        assert list(parse("b: 1\na: 2\nc: 3\n")) == ["b", "a", "c"]

    def test_key_without_value_or_children_is_null(self):
        assert parse("first:\nsecond: 2\n") == {"first": None, "second": 2}

    def test_value_may_contain_colons(self):
        assert parse("url: http://localhost:8080/path\n") == {"url": "http://localhost:8080/path"}

    def test_crlf_line_endings(self):
        assert parse("a: 1\r\nb: two\r\n") == {"a": 1, "b": "two"}

    def test_only_newlines_split_lines(self):
        """Unicode line separators inside a value do not start a new line."""
        assert parse('title: "a\u2028b"\n') == {"title": "a\u2028b"}
        assert parse("note: a\u2029b\nnext: 1\n") == {"note": "a\u2029b", "next": 1}
        assert [token.line for token in tokenize("a: 1\x0bstill a\nb: 2\n")] == [1, 2]

    def test_parsing_is_idempotent(self):
        source = "projects:\n  - id: one\n    tags:\n      - x\n"

        assert parse(source) == parse(source)


class TestParseSequences:
    """Test cases for sequence documents."""

    def test_sequence_of_scalars(self):
        source = "tags:\n  - api\n  - 'quoted'\n  - 12\n"

        assert parse(source) == {"tags": ["api", "quoted", 12]}

    def test_top_level_sequence(self):
        assert parse("- a\n- b\n") == ["a", "b"]

    def test_sequence_of_inline_objects(self):
        """The first field sits on the dash line, the rest below it."""
        source = (
            "projects:\n"
            "  - id: one\n"
            "    path: /tmp/one\n"
            "    favorite: true\n"
            "  - id: two\n"
            "    path: /tmp/two\n"
        )

        assert parse(source) == {
            "projects": [
                {"id": "one", "path": "/tmp/one", "favorite": True},
                {"id": "two", "path": "/tmp/two"},
            ]
        }

    def test_inline_object_with_nested_list_property(self):
        source = (
            "- name: first\n"
            "  tags:\n"
            "    - a\n"
            "    - b\n"
            "- name: second\n"
        )

        assert parse(source) == [
            {"name": "first", "tags": ["a", "b"]},
            {"name": "second"},
        ]

    def test_bare_dash_introduces_nested_structure(self):
        source = "-\n  name: nested\n- plain\n"

        assert parse(source) == [{"name": "nested"}, "plain"]

    def test_quoted_item_with_colon_is_a_scalar(self):
        assert parse('- "a: b"\n') == ["a: b"]


class TestParseErrors:
    """Test cases for syntax errors."""

    def test_missing_colon(self):
        with pytest.raises(ConfigSyntaxError, match="Expected ':'") as excinfo:
            parse("name: ok\njust some text\n")

        assert excinfo.value.line == 2

    def test_unexpected_deeper_indent(self):
        with pytest.raises(ConfigSyntaxError, match="Invalid indentation") as excinfo:
            parse("a: 1\n  b: 2\n")

        assert excinfo.value.line == 2

    def test_list_item_inside_mapping(self):
        with pytest.raises(ConfigSyntaxError, match="Unexpected list item") as excinfo:
            parse("a: 1\n- b\n")

        assert excinfo.value.line == 2

    def test_mapping_entry_inside_sequence(self):
        with pytest.raises(ConfigSyntaxError) as excinfo:
            parse("- a\nb: 1\n")

        assert excinfo.value.line == 2

    def test_duplicate_keys_are_rejected(self):
        with pytest.raises(ConfigSyntaxError, match="Duplicate key 'name'") as excinfo:
            parse("name: a\nother: b\nname: c\n")

        assert excinfo.value.line == 3

    def test_duplicate_keys_in_inline_object(self):
        with pytest.raises(ConfigSyntaxError, match="Duplicate key 'id'"):
            parse("- id: 1\n  id: 2\n")

    def test_dangling_content_after_top_level_value(self):
        source = "items:\n  - a\n    extra: 1\n"

        with pytest.raises(ConfigSyntaxError):
            parse(source)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse("broken\n")
