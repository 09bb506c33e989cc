from __future__ import annotations

import enum
from typing import Optional


class IndentAdjustment(enum.Enum):
    """Change applied to the level counter after an indent string is produced."""
    INCREASE = "increase"
    DECREASE = "decrease"
    NONE = "none"


class IndentTracker:
    """
    Indentation cursor of one printer.

    Every printer owns its own tracker, so independent format calls
    (and nested fragment renders) never share a level counter.
    """

    def __init__(self, *, use_tabs: bool = False, tab_width: int = 4, level: int = 0):
        self.use_tabs = use_tabs
        self.tab_width = tab_width
        self.level = level

    @property
    def unit(self) -> str:
        """One indentation step."""
        return "\t" if self.use_tabs else " " * self.tab_width

    def reset(self, level: int = 0) -> None:
        self.level = level

    def indent(
        self,
        level_override: Optional[int] = None,
        adjust: IndentAdjustment = IndentAdjustment.NONE,
    ) -> str:
        """
        Return the indent string for the current (or overridden) level,
        then apply the adjustment to the counter.

        Args:
            level_override: Level to render instead of the current one (clamped to >= 0)
            adjust: Change applied to the counter afterwards

        Returns:
            Indentation prefix for the pre-adjustment level
        """
        level = max(level_override, 0) if level_override is not None else self.level

        if adjust is IndentAdjustment.INCREASE:
            self.level += 1
        elif adjust is IndentAdjustment.DECREASE:
            self.level = max(self.level - 1, 0)

        return self.unit * max(level, 0)

    def at(self, level: int) -> str:
        """Indent string for an explicit level; the counter is left untouched."""
        return self.unit * max(level, 0)

    def width(self, text: str) -> int:
        """Visual width of a whitespace prefix, tabs expanded to tab_width."""
        return len(text.expandtabs(self.tab_width))

    def level_of(self, prefix: str) -> int:
        """Number of whole indentation steps covered by a whitespace prefix."""
        step = self.tab_width if self.tab_width > 0 else 1
        return self.width(prefix) // step


__all__ = ["IndentAdjustment", "IndentTracker"]
