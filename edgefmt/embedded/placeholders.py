"""
Placeholder bookkeeping for embedded code.

Template spans are cut out of script/style bodies before the foreign
formatter runs and put back afterwards. Every cut is recorded in order;
restoration replays the records by index and replaces the exact token,
so nothing in the formatted output is ever re-scanned for lookalikes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Set, Tuple

from ..foreign.comment_style import CommentStyle

PLACEHOLDER_BASE = "__edgefmt_ph"


class ExtractionCategory(enum.Enum):
    SAFE_MUSTACHE = "safe_mustache"   # {{{ }}}
    MUSTACHE = "mustache"             # {{ }}, @{{ }}, {{-- --}}
    BLOCK = "block"                   # @keyword(args) ... @end
    DIRECTIVE = "directive"           # single-line @keyword(args), @!name(args)

    @property
    def commented(self) -> bool:
        """Directive placeholders sit where statements go, so they are hidden in comments."""
        return self in (ExtractionCategory.BLOCK, ExtractionCategory.DIRECTIVE)


@dataclass(frozen=True)
class TextRange:
    """Range in text by character positions."""
    start_char: int
    end_char: int

    def __post_init__(self):
        if self.start_char > self.end_char:
            raise ValueError(f"Invalid range: start_char ({self.start_char}) > end_char ({self.end_char})")

    def overlaps(self, other: TextRange) -> bool:
        return not (self.end_char <= other.start_char or other.end_char <= self.start_char)


@dataclass(frozen=True)
class Extraction:
    """One cut-out template span."""
    index: int
    category: ExtractionCategory
    original: str    # literal source text, earlier placeholders already resolved
    marker: str      # bare placeholder name
    token: str       # text written into the foreign code (marker, maybe comment-wrapped)


def salted_prefix(text: str, base: str = PLACEHOLDER_BASE) -> str:
    """Placeholder prefix guaranteed absent from `text`."""
    prefix = base
    salt = 0
    while prefix in text:
        salt += 1
        prefix = f"{base}{salt}"
    return prefix


class PlaceholderTable:
    """
    Ordered extraction records of one embedded body.
    """

    def __init__(self, text: str, comment_style: CommentStyle):
        self.prefix = salted_prefix(text)
        self.comment_style = comment_style
        self.records: List[Extraction] = []
        # indices of records nested inside a later span; their tokens never reach the output
        self.absorbed: Set[int] = set()

    def __len__(self) -> int:
        return len(self.records)

    def _new_record(self, category: ExtractionCategory, original: str) -> Extraction:
        index = len(self.records)
        marker = f"{self.prefix}_{index}__"
        token = self.comment_style.wrap(marker) if category.commented else marker
        record = Extraction(
            index=index,
            category=category,
            original=self._absorb(original),
            marker=marker,
            token=token,
        )
        self.records.append(record)
        return record

    def substitute(
        self,
        text: str,
        spans: Iterable[Tuple[int, int]],
        category: ExtractionCategory,
    ) -> str:
        """
        Replace `spans` of `text` with fresh placeholders.

        Spans must not overlap; records are numbered left to right.

        Raises:
            ValueError: If two spans overlap or a span is out of bounds
        """
        ranges = sorted((TextRange(s, e) for s, e in spans), key=lambda r: r.start_char)
        for left, right in zip(ranges, ranges[1:]):
            if left.overlaps(right):
                raise ValueError(f"Overlapping placeholder spans: {left} and {right}")
        if ranges and (ranges[0].start_char < 0 or ranges[-1].end_char > len(text)):
            raise ValueError("Placeholder span exceeds text length")

        parts: List[str] = []
        pos = 0
        for r in ranges:
            record = self._new_record(category, text[r.start_char:r.end_char])
            parts.append(text[pos:r.start_char])
            parts.append(record.token)
            pos = r.end_char
        parts.append(text[pos:])
        return "".join(parts)

    def _absorb(self, span: str) -> str:
        for record in self.records:
            if record.marker in span:
                self.absorbed.add(record.index)
        return self.resolve(span)

    def live_records(self) -> Iterator[Extraction]:
        """Records whose tokens are expected in the formatted text, by index."""
        return (r for r in self.records if r.index not in self.absorbed)

    def resolve(self, text: str) -> str:
        """Put the literal text of every recorded span back into `text`."""
        for record in self.records:
            if record.marker in text:
                text = text.replace(record.token, record.original).replace(record.marker, record.original)
        return text


__all__ = [
    "PLACEHOLDER_BASE",
    "ExtractionCategory",
    "TextRange",
    "Extraction",
    "salted_prefix",
    "PlaceholderTable",
]
