from .base import ForeignFormatter
from .css import CssFormatter
from .javascript import BeautifyFlags, JavaScriptFormatter

__all__ = ["ForeignFormatter", "CssFormatter", "JavaScriptFormatter", "BeautifyFlags"]
