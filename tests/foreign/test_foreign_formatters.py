"""
Integration with the real tree-sitter grammars and beautifiers.
"""

import pytest

pytest.importorskip("tree_sitter_javascript")
pytest.importorskip("tree_sitter_css")

from edgefmt import format_tree
from edgefmt.errors import ForeignFormatterError
from edgefmt.foreign import BeautifyFlags, CssFormatter, JavaScriptFormatter
from edgefmt.foreign.javascript import JavaScriptDocument
from edgefmt.nodes import ScriptElement, StyleElement

from tests.infrastructure import close, doc, tag


def test_javascript_formatter_reindents():
    out = JavaScriptFormatter().format("function f(){return 1}", 2, BeautifyFlags())
    assert out.splitlines() == ["function f() {", "  return 1", "}"]


def test_javascript_formatter_uses_tabs():
    out = JavaScriptFormatter().format("if(a){b()}", 4, BeautifyFlags(use_tabs=True))
    assert "\n\tb()" in out


def test_javascript_syntax_error_has_position():
    with pytest.raises(ForeignFormatterError) as exc:
        JavaScriptFormatter().format("let a = 1;\nconst = ;", 4, BeautifyFlags())
    assert exc.value.language == "javascript"
    assert exc.value.diagnostic is not None
    assert exc.value.diagnostic.line == 2


def test_clean_document_has_no_error():
    assert JavaScriptDocument("const a = 1;").first_error() is None


def test_css_formatter():
    out = CssFormatter().format("a{color:red;margin:0}", "  ")
    assert out.splitlines() == ["a {", "  color: red;", "  margin: 0", "}"]


def test_css_syntax_error():
    with pytest.raises(ForeignFormatterError) as exc:
        CssFormatter().format("a { color: red; ", "    ")
    assert exc.value.language == "css"


def test_script_element_end_to_end():
    node = ScriptElement("<script>\nconst a={{ value }};\n@if(debug)\nconsole.log(a)\n@end\n</script>")
    out = format_tree(doc(tag("body"), node, close("body")))
    lines = out.splitlines()
    assert lines[0] == "<body>"
    assert lines[1] == "    <script>"
    assert "        const a = {{ value }};" in lines
    assert "        @if(debug)" in lines
    assert "            console.log(a)" in lines
    assert "        @end" in lines
    assert lines[-2:] == ["    </script>", "</body>"]


def test_style_element_end_to_end():
    node = StyleElement("<style>\nbody{color:{{ color }}}\n</style>")
    out = format_tree(doc(node))
    assert out.startswith("<style>\n    body {\n")
    assert "color: {{ color }}" in out
    assert out.endswith("</style>\n")
