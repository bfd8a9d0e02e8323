"""Highlight style presets.

A :class:`HighlightStyle` maps each :class:`Category` to a rich style
string and carries the metrics used to size the content pane.  The engine
never inspects the styles themselves; it only asks for them by category.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.cells import cell_len
from rich.style import Style

from jpreview._highlight import Category

_DEFAULT_COLORS: dict[Category, str] = {
    Category.KEY: "cyan",
    Category.STRING: "green",
    Category.LINK: "underline blue",
    Category.NUMBER: "yellow",
    Category.LITERAL: "magenta",
    Category.PUNCTUATION: "bold white",
    Category.PLAIN: "",
    Category.FOLD: "dim italic",
    Category.LINE_NUMBER: "dim cyan",
}

_MARIANA_COLORS: dict[Category, str] = {
    Category.KEY: "#ffffff",
    Category.STRING: "#99c794",
    Category.LINK: "underline #6699cc",
    Category.NUMBER: "#f99157",
    Category.LITERAL: "#ec5f66",
    Category.PUNCTUATION: "#a7adba",
    Category.PLAIN: "",
    Category.FOLD: "italic #a7adba",
    Category.LINE_NUMBER: "#a7adba",
}


@dataclass
class HighlightStyle:
    """Category -> presentation attributes, plus font metrics.

    ``cell_width`` is the width of one terminal cell in the caller's units
    and ``padding`` is added to the widest measured line.
    """

    colors: dict[Category, str] = field(default_factory=lambda: dict(_DEFAULT_COLORS))
    gutter_background: str = ""
    content_background: str = ""
    cursor: str = "reverse"
    cell_width: int = 1
    padding: int = 1
    name: str = "custom"

    def __post_init__(self) -> None:
        self._style_cache: dict[Category, Style] = {}

    def style_for(self, category: Category) -> Style:
        style = self._style_cache.get(category)
        if style is None:
            style = Style.parse(self.colors.get(category) or "none")
            if self.content_background and category is not Category.LINE_NUMBER:
                style = Style.parse(f"on {self.content_background}") + style
            self._style_cache[category] = style
        return style

    def gutter_style(self) -> Style:
        style = self.style_for(Category.LINE_NUMBER)
        if self.gutter_background:
            style = Style.parse(f"on {self.gutter_background}") + style
        return style

    def measure(self, text: str) -> int:
        """Rendered width of *text* in the caller's units."""
        return cell_len(text) * self.cell_width + self.padding

    @classmethod
    def default(cls) -> HighlightStyle:
        return cls(name="default")

    @classmethod
    def mariana(cls) -> HighlightStyle:
        return cls(
            colors=dict(_MARIANA_COLORS),
            gutter_background="#343d46",
            content_background="#303841",
            name="mariana",
        )


PRESETS = {
    "default": HighlightStyle.default,
    "mariana": HighlightStyle.mariana,
}
