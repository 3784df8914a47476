"""
test_hyperlambda.py — The bundled Hyperlambda loader.
"""

import pytest

from endpoint_discovery import HyperlambdaError, HyperlambdaLoader, Node
from endpoint_discovery.hyperlambda import parse


class TestParse:
    def test_nested_nodes(self):
        """Three spaces of indentation make a child node."""
        root = parse("a:1\n   b\n      c:x\nd\n")
        assert [c.name for c in root.children] == ["a", "d"]
        a = root.children[0]
        assert a.value == "1"
        assert a.children[0].name == "b"
        assert a.children[0].children[0] == Node("c", "x")

    def test_typed_values(self):
        root = parse("a:int:5\nb:bool:true\nc:bool:false\nd:decimal:1.5\ne:string:hello\n")
        assert [c.value for c in root.children] == [5, True, False, 1.5, "hello"]

    def test_untyped_value_keeps_colons(self):
        root = parse("url:http://example.com:8080\n")
        assert root.children[0].value == "http://example.com:8080"

    def test_expression_type(self):
        root = parse("return-nodes:x:-/*\n")
        assert root.children[0].value == "-/*"

    def test_quoted_name_and_value(self):
        root = parse('"count(*) as count"\nmsg:"a \\"b\\", c"\n')
        assert root.children[0].name == "count(*) as count"
        assert root.children[1].value == 'a "b", c'

    def test_multiline_string(self):
        root = parse('sql:@"select *\n  from users"\nnext\n')
        assert root.children[0].value == "select *\n  from users"
        assert root.children[1].name == "next"

    def test_empty_value(self):
        assert parse("a:\n").children[0].value == ""

    def test_comments_are_skipped(self):
        root = parse("// line comment\n/*\n  block\n*/\na\n   // inner\n   b\n")
        assert [c.name for c in root.children] == ["a"]
        assert root.children[0].children[0].name == "b"

    def test_crlf_line_endings(self):
        root = parse("a\r\n   b:1\r\n")
        assert root.children[0].children[0] == Node("b", "1")


class TestParseErrors:
    def test_bad_indentation(self):
        with pytest.raises(HyperlambdaError, match="multiple of 3"):
            parse("a\n  b\n")

    def test_skipped_level(self):
        with pytest.raises(HyperlambdaError):
            parse("a\n      b\n")

    def test_unterminated_string(self):
        with pytest.raises(HyperlambdaError, match="unterminated"):
            parse('a:"open\n')

    def test_unterminated_comment(self):
        with pytest.raises(HyperlambdaError, match="unterminated comment"):
            parse("/* never closed\na\n")

    def test_bad_typed_value(self):
        with pytest.raises(HyperlambdaError):
            parse("a:int:abc\n")

    def test_error_is_value_error(self):
        """Loaders signal bad content with ValueError."""
        with pytest.raises(ValueError):
            HyperlambdaLoader().parse("a:bool:maybe\n")


def test_loader_extensions():
    assert HyperlambdaLoader().extensions == {".hl"}
