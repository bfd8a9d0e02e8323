"""Terminal app around the JSON preview widget."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static

from jpreview.decorator import DEFAULT_INDENT
from jpreview.errors import DecorationError
from jpreview.style import PRESETS, HighlightStyle
from jpreview.widget import JsonPreview

logger = logging.getLogger(__name__)

SAMPLE_JSON = """\
{
    "name": "jpreview",
    "version": "1.0.0",
    "homepage": "https://example.com/jpreview",
    "features": [
        "line numbers",
        "syntax highlighting",
        "folding"
    ],
    "config": {
        "indent": 4,
        "stable_width": true,
        "nested": {
            "deep": {
                "value": null
            }
        }
    },
    "scores": [100, 200.5, -3e2]
}"""


class JsonPreviewApp(App):
    """TUI app that wraps the JsonPreview widget."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #preview {
        height: 1fr;
        border: solid $accent;
    }
    #help-bar {
        height: auto;
        max-height: 3;
        padding: 0 1;
        color: $text-muted;
        background: $surface;
        border-top: solid $accent 50%;
    }
    """

    TITLE = "JSON Preview"
    BINDINGS = []

    def __init__(
        self,
        content: str = SAMPLE_JSON,
        *,
        source: str = "",
        style: HighlightStyle | None = None,
        indent: int = DEFAULT_INDENT,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.content = content
        self.source = source
        self.json_style = style or HighlightStyle.default()
        self.indent = indent
        self.last_error: DecorationError | None = None

    def compose(self) -> ComposeResult:
        self.sub_title = self.source or "[sample]"
        yield Header(show_clock=True)
        yield JsonPreview(
            self.content, style=self.json_style, indent=self.indent, id="preview"
        )
        yield Static(
            "[b]Move:[/b] j k  gg G  PgUp/PgDn  h l\n"
            "[b]Fold:[/b] Space/Enter za [dim]toggle[/]  zM [dim]fold all[/]"
            "  zR [dim]unfold all[/]  q [dim]quit[/]",
            id="help-bar",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#preview").focus()

    def on_json_preview_decorated(self, event: JsonPreview.Decorated) -> None:
        result = event.result
        self.sub_title = f"{self.source or '[sample]'}  {len(result)} lines"
        self.last_error = None

    def on_json_preview_decoration_failed(
        self, event: JsonPreview.DecorationFailed
    ) -> None:
        self.last_error = event.error
        self.notify(f"Invalid JSON: {event.error}", severity="error", timeout=6)

    def on_json_preview_quit(self, event: JsonPreview.Quit) -> None:
        self.exit()


def _reattach_tty() -> None:
    """Point fd 0 back at the terminal after the document came from a pipe."""
    try:
        tty_fd = os.open("/dev/tty", os.O_RDONLY)
    except OSError as exc:
        logger.debug("no controlling terminal: %s", exc)
        return
    os.dup2(tty_fd, 0)
    os.close(tty_fd)
    sys.stdin = open(0, "r")


def _load_content(file_path: str) -> tuple[str, str]:
    """Return ``(content, source)`` for *file_path*.

    ``-`` reads standard input, as does an empty path when input is piped.
    An empty path on a terminal gives the sample document.
    """
    if file_path == "-" or (not file_path and not sys.stdin.isatty()):
        return sys.stdin.read(), "<stdin>"
    if file_path:
        return Path(file_path).read_text(encoding="utf-8"), file_path
    return SAMPLE_JSON, ""


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="jpreview",
        description="Line-numbered, foldable JSON preview in the terminal",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="JSON file to preview, - for stdin (omit for a sample)",
    )
    parser.add_argument(
        "--style",
        choices=sorted(PRESETS),
        default="default",
        help="highlight style preset",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=DEFAULT_INDENT,
        help="spaces per nesting level (default: %(default)s)",
    )
    parser.add_argument(
        "--log",
        default="",
        metavar="FILE",
        help="write debug logs to FILE",
    )
    args = parser.parse_args()

    if args.log:
        logging.basicConfig(
            filename=args.log,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    if args.indent < 0:
        parser.error("--indent must not be negative")

    try:
        content, source = _load_content(args.file)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"jpreview: {exc}", file=sys.stderr)
        sys.exit(1)
    logger.debug("loaded %d chars from %s", len(content), source or "sample")
    if source == "<stdin>":
        _reattach_tty()

    app = JsonPreviewApp(
        content,
        source=source,
        style=PRESETS[args.style](),
        indent=args.indent,
    )
    app.run()


if __name__ == "__main__":
    main()
