import pytest

from edgefmt import FormatOptions, format_tree

from tests.infrastructure import StubCssFormatter, StubJsFormatter


@pytest.fixture
def css_stub() -> StubCssFormatter:
    return StubCssFormatter()


@pytest.fixture
def js_stub() -> StubJsFormatter:
    return StubJsFormatter()


@pytest.fixture
def fmt(css_stub, js_stub):
    """format_tree bound to the stub formatters."""
    def _fmt(tree, options=None):
        return format_tree(tree, options or FormatOptions(), css_formatter=css_stub, js_formatter=js_stub)
    return _fmt
