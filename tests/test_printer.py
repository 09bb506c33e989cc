import logging

import pytest

from edgefmt import FormatOptions
from edgefmt.nodes import (
    Attribute,
    Cdata,
    ConditionalComment,
    Doctype,
    EmbeddedCode,
    HtmlComment,
    LineBreak,
    NodeType,
    OpeningTag,
    ProcessingInstruction,
    Prop,
    UnknownNode,
)
from edgefmt.printer import _HANDLERS, Printer

from tests.infrastructure import (
    attr, close, comment, doc, edge, escaped, lb, lbs, mustache, safe, tag, text, void,
)


def test_every_node_type_has_a_handler():
    assert set(_HANDLERS) == set(NodeType)


def test_text_followed_by_mustache(fmt):
    assert fmt(doc(text("Hello"), mustache("{{name}}"))) == "Hello{{ name }}\n"


def test_single_node_without_document(fmt):
    assert fmt(mustache("{{x}}")) == "{{ x }}\n"


# --- Block and inline tags ---------------------------------------------------

def test_nested_block_tags(fmt):
    tree = doc(tag("div"), lb(), tag("p"), text("Hi"), close("p"), lb(), close("div"))
    assert fmt(tree) == "<div>\n    <p>\n        Hi\n    </p>\n</div>\n"


def test_inline_tags_flow_with_text(fmt):
    tree = doc(
        tag("p"),
        text("Click "),
        tag("a", attr("href", '"/x"')),
        text("here"),
        close("a"),
        text("."),
        close("p"),
    )
    assert fmt(tree) == '<p>\n    Click <a href="/x">here</a>.\n</p>\n'


def test_void_tag_self_closes(fmt):
    tree = doc(tag("div"), void("img", attr("src", '"a.png"')), close("div"))
    assert fmt(tree) == '<div>\n    <img src="a.png" />\n</div>\n'


def test_opening_tag_with_void_name_is_void(fmt):
    assert fmt(doc(tag("br"))) == "<br />\n"


def test_void_closing_tag_prints_nothing(fmt):
    out = fmt(doc(tag("br"), close("br")))
    assert out == "<br />\n"
    assert "</br>" not in out


def test_void_tag_does_not_indent_following_siblings(fmt):
    tree = doc(tag("hr"), lb(), tag("div"), close("div"))
    assert fmt(tree) == "<hr />\n<div>\n</div>\n"


# --- Tag props layout ------------------------------------------------------------

def test_short_props_stay_on_one_line(fmt):
    assert fmt(doc(tag("div", attr("class", '"x"'), attr("hidden")), close("div"))) == (
        '<div class="x" hidden>\n</div>\n'
    )


def test_long_props_explode_one_per_line(fmt):
    cls = '"' + "a" * 50 + '"'
    ident = '"' + "b" * 30 + '"'
    tree = doc(tag("div", attr("class", cls), attr("id", ident)), close("div"))
    assert fmt(tree) == f"<div\n    class={cls}\n    id={ident}\n>\n</div>\n"


def test_print_width_threshold_is_exclusive(fmt):
    value = '"' + "x" * 72 + '"'
    item = f"class={value}"
    assert len(item) == 80
    assert fmt(doc(tag("section", attr("class", value)))) == f"<section {item}>\n"
    assert fmt(doc(tag("section", attr("class", value))), FormatOptions(print_width=79)) == (
        f"<section\n    {item}\n>\n"
    )


def test_exploded_void_tag_closes_at_tag_indent(fmt):
    opts = FormatOptions(single_attribute_per_line=True)
    tree = doc(tag("div"), void("input", attr("type", '"text"'), attr("name", '"q"')), close("div"))
    assert fmt(tree, opts) == '<div>\n    <input\n        type="text"\n        name="q"\n    />\n</div>\n'


def test_single_attribute_per_line_needs_two_items(fmt):
    opts = FormatOptions(single_attribute_per_line=True)
    assert fmt(doc(tag("div", attr("id", '"a"'))), opts) == '<div id="a">\n'


def test_tag_items_order_and_spacing(fmt):
    node = OpeningTag(
        tag_name="div",
        attributes=(Attribute("id", '"a"'),),
        safe_mustaches=(Prop("{{{attrs}}}"),),
        mustaches=(Prop("{{$props.toAttrs()}}"),),
        tag_props=(Prop("@if(x) hidden @end"),),
        comments=(Prop("{{--note--}}"),),
    )
    assert fmt(doc(node)) == '<div id="a" {{{ attrs }}} {{ $props.toAttrs() }} @if(x) hidden @end {{-- note --}}>\n'


def test_multiline_tag_prop_forces_explosion(fmt):
    tree = doc(tag("div", attr("id", '"a"'), tag_props=['@if(a)\n  class="x"\n@end']))
    assert fmt(tree) == '<div\n    id="a"\n    @if(a)\n      class="x"\n    @end\n>\n'


def test_attribute_values_are_verbatim(fmt):
    assert fmt(doc(void("img", attr("alt", "'  spaced   out '")))) == "<img alt='  spaced   out ' />\n"


# --- Control blocks ----------------------------------------------------------------

def test_control_block_body_is_one_level_deeper(fmt):
    tree = doc(edge("@if(x)"), lb(), text("a"), lb(), edge("@end"))
    assert fmt(tree) == "@if(x)\n    a\n@end\n"


def test_control_block_with_else_and_tags(fmt):
    tree = doc(
        edge("@if(user)"), lb(),
        tag("p"), text("Hi"), close("p"), lb(),
        edge("@else"), lb(),
        text("Bye"), lb(),
        edge("@end"),
    )
    assert fmt(tree) == "@if(user)\n    <p>\n        Hi\n    </p>\n@else\n    Bye\n@end\n"


def test_end_decreases_level_by_exactly_one(fmt):
    tree = doc(
        edge("@if(a)"), lb(),
        edge("@each(item in items)"), lb(),
        text("x"), lb(),
        edge("@end"), lb(),
        text("y"), lb(),
        edge("@end"), lb(),
        text("z"),
    )
    assert fmt(tree) == "@if(a)\n    @each(item in items)\n        x\n    @end\n    y\n@end\nz\n"


@pytest.mark.parametrize("directive", [
    "@include('partials/header')",
    "@!component('button', { text: 'Go' })",
    "@let(total = 1)",
    "@debugger",
    "@if(x) inline @end",
])
def test_flat_directives_keep_level(fmt, directive):
    tree = doc(edge(directive), lb(), text("after"))
    assert fmt(tree) == f"{directive}\nafter\n"


def test_configured_flat_directives(fmt):
    tree = doc(edge("@component('card')"), lb(), text("after"))
    assert fmt(tree) == "@component('card')\n    after\n"
    opts = FormatOptions(flat_directives=("component",))
    assert fmt(tree, opts) == "@component('card')\nafter\n"


def test_multiline_directive_rebases_continuation_lines(fmt):
    tree = doc(edge("@if(\n  a &&\n      b\n)"), lb(), text("x"), lb(), edge("@end"))
    assert fmt(tree) == "@if(\n  a &&\n      b\n)\n    x\n@end\n"


def test_multiline_directive_never_shallower_than_indent(fmt):
    tree = doc(tag("div"), edge("@if(\n  a &&\n      b\n)"), lb(), edge("@end"), close("div"))
    out = fmt(tree)
    assert out == "<div>\n    @if(\n    a &&\n      b\n    )\n    @end\n</div>\n"

    # Feeding the rendered directive back in yields the same lines
    again = fmt(doc(tag("div"), edge("@if(\n    a &&\n      b\n    )"), lb(), edge("@end"), close("div")))
    assert again == out


def test_control_block_newline_left_to_following_linebreak(fmt):
    tree = doc(edge("@if(x)"), *lbs(2), text("a"), lb(), edge("@end"))
    assert fmt(tree) == "@if(x)\n\n    a\n@end\n"


# --- Interpolations and comments -------------------------------------------------

def test_safe_mustache_spacing(fmt):
    assert fmt(doc(safe("{{{html}}}"))) == "{{{ html }}}\n"


def test_escaped_mustache_keeps_sigil(fmt):
    assert fmt(doc(escaped("@{{raw}}"))) == "@{{ raw }}\n"


def test_mustache_inside_block_is_indented(fmt):
    assert fmt(doc(tag("div"), mustache("{{ a }}"), close("div"))) == "<div>\n    {{ a }}\n</div>\n"


def test_template_comment_spacing(fmt):
    assert fmt(doc(comment("{{--note--}}"))) == "{{-- note --}}\n"


def test_multiline_template_comment_is_reindented(fmt):
    tree = doc(tag("div"), comment("{{--\n  line one\n    line two\n--}}"), close("div"))
    assert fmt(tree) == "<div>\n    {{--\n        line one\n        line two\n    --}}\n</div>\n"


# --- Text ---------------------------------------------------------------------------

def test_text_lines_are_trimmed_and_indented(fmt):
    tree = doc(tag("div"), text("  first   \n      second\n"), close("div"))
    assert fmt(tree) == "<div>\n    first\n    second\n</div>\n"


def test_whitespace_only_text_prints_nothing_between_blocks(fmt):
    assert fmt(doc(tag("div"), text("   "), close("div"))) == "<div>\n</div>\n"


# --- Line breaks ------------------------------------------------------------------

def test_five_linebreaks_give_one_blank_line(fmt):
    out = fmt(doc(text("a"), *lbs(5), text("b")))
    assert out == "a\n\nb\n"
    assert "\n\n\n" not in out


def test_single_linebreak_between_content_adds_nothing(fmt):
    assert fmt(doc(text("a"), lb(), text("b"))) == "a\nb\n"


def test_leading_and_trailing_linebreaks_are_dropped(fmt):
    assert fmt(doc(*lbs(3), text("a"), *lbs(2))) == "a\n"


def test_linebreak_value_is_passed_through(fmt):
    assert fmt(doc(text("a"), LineBreak("\r\n"), LineBreak("\r\n"), text("b"))) == "a\n\r\nb\n"
    assert fmt(doc(edge("@include('a')"), LineBreak("\r\n"), text("x"))) == "@include('a')\r\nx\n"


# --- Embedded code between directives --------------------------------------------

def test_embedded_code_keeps_relative_depth(fmt):
    code = EmbeddedCode("  if (b) {\n      c()\n\n  }")
    assert fmt(doc(edge("@if(a)"), code, edge("@end"))) == (
        "@if(a)\n    if (b) {\n        c()\n\n    }\n@end\n"
    )


def test_embedded_code_depth_uses_smallest_step(fmt):
    code = EmbeddedCode("a {\n   b {\n      c\n   }\n}")
    out = fmt(doc(tag("style"), code, close("style")), FormatOptions(tab_width=2))
    assert out == "<style>\n  a {\n    b {\n      c\n    }\n  }\n</style>\n"


# --- Passthrough nodes ------------------------------------------------------------

def test_doctype(fmt):
    assert fmt(doc(Doctype("<!DOCTYPE html>"), tag("html"))) == "<!DOCTYPE html>\n<html>\n"


def test_html_comment_keeps_relative_indentation(fmt):
    tree = doc(tag("div"), HtmlComment("<!--\n  a\n    b\n-->"), close("div"))
    assert fmt(tree) == "<div>\n    <!--\n      a\n        b\n    -->\n</div>\n"


@pytest.mark.parametrize("node", [
    ConditionalComment("<!--[if IE]><p>old</p><![endif]-->"),
    Cdata("<![CDATA[ x < y ]]>"),
])
def test_single_line_passthrough_is_indented(fmt, node):
    assert fmt(doc(tag("div"), node, close("div"))) == f"<div>\n    {node.value}\n</div>\n"


def test_processing_instruction_skips_first_indent(fmt):
    tree = doc(tag("div"), ProcessingInstruction("<?php echo 1 ?>"), close("div"))
    assert fmt(tree) == "<div>\n<?php echo 1 ?>\n</div>\n"


# --- Options and misc -------------------------------------------------------------

def test_tabs(fmt):
    tree = doc(tag("div"), tag("p"), text("x"), close("p"), close("div"))
    assert fmt(tree, FormatOptions(use_tabs=True)) == "<div>\n\t<p>\n\t\tx\n\t</p>\n</div>\n"


def test_tab_width(fmt):
    tree = doc(tag("div"), text("x"), close("div"))
    assert fmt(tree, FormatOptions(tab_width=2)) == "<div>\n  x\n</div>\n"


def test_unknown_node_is_skipped_and_logged(fmt, caplog):
    with caplog.at_level(logging.WARNING, logger="edgefmt"):
        out = fmt(doc(text("a"), UnknownNode(kind="fancyNode", start=4, end=9), text("b")))
    assert out == "a\nb\n"
    assert "fancyNode" in caplog.text


def test_stray_closing_tag_does_not_go_negative(fmt):
    assert fmt(doc(close("div"), tag("div"), text("x"), close("div"))) == "</div>\n<div>\n    x\n</div>\n"


def test_printers_do_not_share_levels(css_stub, js_stub):
    first = Printer(css_formatter=css_stub, js_formatter=js_stub)
    first.print_root(doc(tag("div")))
    assert first.tracker.level == 1

    second = Printer(css_formatter=css_stub, js_formatter=js_stub)
    assert second.print_root(doc(text("x"))) == "x\n"


def test_document_resets_level(css_stub, js_stub):
    printer = Printer(css_formatter=css_stub, js_formatter=js_stub)
    printer.print_root(doc(tag("div")))
    assert printer.print_root(doc(text("x"))) == "x\n"


def test_formatting_is_idempotent_on_flat_output(fmt):
    tree = doc(tag("ul"), lb(), tag("li"), mustache("{{ item }}"), close("li"), lb(), close("ul"))
    out = fmt(tree)
    assert out == "<ul>\n    <li>\n        {{ item }}\n    </li>\n</ul>\n"

    # Rebuild the tree the parser would produce from the output
    again = doc(
        tag("ul"), lb(),
        text("    "), tag("li"), lb(),
        text("        "), mustache("{{ item }}"), lb(),
        text("    "), close("li"), lb(),
        close("ul"), lb(),
    )
    assert fmt(again) == out
