"""Read-only JSON preview widget."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.cells import cell_len
from rich.text import Text
from textual import events, work
from textual.message import Message
from textual.widget import Widget

from jpreview._highlight import to_text
from jpreview.decorator import DEFAULT_INDENT, DecorationResult, decorate
from jpreview.errors import DecorationError, FoldError
from jpreview.preview import PreviewController
from jpreview.style import HighlightStyle

logger = logging.getLogger(__name__)


def _crop_cells(line: Text, left: int, width: int) -> Text:
    """Columns ``left .. left + width`` of *line*, counted in terminal cells.

    A wide character cut by the left edge is dropped; one that does not fit
    on the right is left out.
    """
    plain = line.plain
    if plain.isascii():
        return line[left : left + width]
    pos = 0
    start = None
    end = len(plain)
    for i, ch in enumerate(plain):
        if start is None and pos >= left:
            start = i
        cw = cell_len(ch)
        if pos + cw > left + width:
            end = i
            break
        pos += cw
    if start is None:
        return Text()
    return line[start : max(start, end)]


class JsonPreview(Widget, can_focus=True):
    """A line-numbered, highlighted, foldable JSON viewer.

    Keys:
      j k Up Down  PgUp PgDn  gg G      move
      h l Left Right                      scroll sideways
      Space Enter za                      toggle fold on cursor line
      zM zR                               fold / unfold everything
      q                                   quit
    """

    DEFAULT_CSS = """
    JsonPreview {
        height: 1fr;
        background: $surface;
        padding: 0 1;
    }
    """

    # -- Messages ----------------------------------------------------------

    @dataclass
    class Decorated(Message):
        result: DecorationResult

    @dataclass
    class DecorationFailed(Message):
        error: DecorationError

    class Quit(Message):
        pass

    # -- Init --------------------------------------------------------------

    def __init__(
        self,
        initial_content: str | None = None,
        *,
        style: HighlightStyle | None = None,
        indent: int = DEFAULT_INDENT,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.json_style: HighlightStyle = style or HighlightStyle.default()
        self.indent: int = indent
        self.controller = PreviewController()
        self.cursor_row: int = 0
        self.pending: str = ""
        self.status_msg: str = ""
        self._scroll_top: int = 0
        self._scroll_left: int = 0
        self._initial_content = initial_content

    def on_mount(self) -> None:
        if self._initial_content is not None:
            self.preview(self._initial_content)

    # -- Public API --------------------------------------------------------

    @property
    def result(self) -> DecorationResult | None:
        return self.controller.result

    def preview(self, content: str, style: HighlightStyle | None = None) -> int:
        """Decorate *content* off the UI thread; returns the request number."""
        if style is not None:
            self.json_style = style
        seq = self.controller.begin()
        self.status_msg = "decorating..."
        self._decorate_worker(seq, content, self.json_style, self.indent)
        return seq

    @work(thread=True, exclusive=True, group="decorate")
    def _decorate_worker(
        self, seq: int, content: str, style: HighlightStyle, indent: int
    ) -> None:
        try:
            result = decorate(content, style, indent=indent)
        except DecorationError as exc:
            self.app.call_from_thread(self._deliver_error, seq, exc)
            return
        self.app.call_from_thread(self._deliver, seq, result)

    def _deliver(self, seq: int, result: DecorationResult) -> None:
        if not self.controller.deliver(seq, result):
            return
        self.cursor_row = 0
        self._scroll_top = 0
        self._scroll_left = 0
        self.status_msg = f"{len(result.document.nodes)} nodes"
        self.post_message(self.Decorated(result))
        self.refresh()

    def _deliver_error(self, seq: int, error: DecorationError) -> None:
        if not self.controller.fail(seq, error):
            return
        logger.debug("decoration %d failed: %s", seq, error)
        self.status_msg = str(error)
        self.post_message(self.DecorationFailed(error))
        self.refresh()

    def set_highlight_style(self, style: HighlightStyle) -> None:
        self.json_style = style
        if self.result is not None:
            self.result.restyle(style)
        self.refresh()

    # -- Folding -----------------------------------------------------------

    def toggle_fold_at_cursor(self) -> None:
        result = self.result
        if result is None or not result.slices:
            return
        owner = result.slices[self.cursor_row].owner_id
        try:
            update = self.controller.toggle_fold(owner)
        except FoldError as exc:
            self.status_msg = str(exc)
            return
        # cursor on a closing line jumps to the folded line
        if update.changed and self.cursor_row >= update.start + len(update.slices):
            self.cursor_row = update.start
        self.status_msg = ""

    def _fold_all(self) -> None:
        if self.result is not None:
            self.result.fold_all()
            self.cursor_row = 0
            self._scroll_top = 0

    def _unfold_all(self) -> None:
        if self.result is not None:
            self.result.unfold_all()

    # -- Geometry ----------------------------------------------------------

    def _line_count(self) -> int:
        return len(self.result.slices) if self.result is not None else 0

    def _gutter_width(self) -> int:
        return max(3, len(str(self._line_count())))

    def _visible_height(self) -> int:
        return max(1, self.content_region.height - 1)

    def _clamp_cursor(self) -> None:
        count = self._line_count()
        self.cursor_row = max(0, min(self.cursor_row, count - 1)) if count else 0
        max_left = 0
        if self.result is not None:
            max_left = cell_len(self.result.max_line_text)
        self._scroll_left = max(0, min(self._scroll_left, max_left))

    def _ensure_cursor_visible(self) -> None:
        vh = self._visible_height()
        if self.cursor_row < self._scroll_top:
            self._scroll_top = self.cursor_row
        elif self.cursor_row >= self._scroll_top + vh:
            self._scroll_top = self.cursor_row - vh + 1

    # =====================================================================
    # Rendering
    # =====================================================================

    def render(self) -> Text:
        width = self.content_region.width
        height = self.content_region.height
        if height < 2 or width < 10:
            return Text("(too small)")

        result = self.result
        style = self.json_style
        ln_width = self._gutter_width()
        avail = max(1, width - ln_width - 1)
        content_height = height - 1
        self._ensure_cursor_visible()

        out = Text(no_wrap=True, overflow="crop")
        out_append = out.append
        gutter_style = style.gutter_style()
        rows_used = 0
        if result is not None:
            slices = result.slices
            left = self._scroll_left
            for idx in range(self._scroll_top, len(slices)):
                if rows_used >= content_height:
                    break
                sl = slices[idx]
                out_append(f"{sl.line_number:>{ln_width}} ", style=gutter_style)
                line = _crop_cells(to_text(sl.styled_content, style), left, avail)
                if idx == self.cursor_row:
                    line.stylize(style.cursor)
                out.append_text(line)
                out_append("\n")
                rows_used += 1

        while rows_used < content_height:
            out_append(f"{'~':>{ln_width}}\n", style="dim blue")
            rows_used += 1

        # status bar
        count = self._line_count()
        pos = f" Ln {self.cursor_row + 1 if count else 0}/{count} "
        if self.pending:
            out_append(f" {self.pending}", style="bold yellow")
        status = f" {self.status_msg}"
        spacer = max(0, width - len(pos) - len(status) - len(self.pending) - 1)
        out_append(status)
        out_append(" " * spacer)
        out_append(pos, style="bold")
        return out

    # =====================================================================
    # Key handling
    # =====================================================================

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()
        self._handle_key(event.key, event.character or "")
        self._clamp_cursor()
        self.refresh()

    def _handle_key(self, key: str, char: str) -> None:
        if self.pending:
            combo = self.pending + char
            self.pending = ""
            if combo == "gg":
                self.cursor_row = 0
            elif combo == "za":
                self.toggle_fold_at_cursor()
            elif combo == "zM":
                self._fold_all()
            elif combo == "zR":
                self._unfold_all()
            return

        if char == "q":
            self.post_message(self.Quit())
        elif char in ("g", "z"):
            self.pending = char
        elif key in ("j", "down"):
            self.cursor_row += 1
        elif key in ("k", "up"):
            self.cursor_row -= 1
        elif char == "G":
            self.cursor_row = self._line_count() - 1
        elif key == "pagedown":
            self.cursor_row += self._visible_height()
        elif key == "pageup":
            self.cursor_row -= self._visible_height()
        elif key in ("l", "right"):
            self._scroll_left += 1
        elif key in ("h", "left"):
            self._scroll_left -= 1
        elif key in ("space", "enter"):
            self.toggle_fold_at_cursor()
