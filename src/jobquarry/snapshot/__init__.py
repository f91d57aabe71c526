"""Page snapshots consumed by the extraction strategies."""

from .html_snapshot import HtmlElement, HtmlSnapshot, is_hidden, render_text

__all__ = ["HtmlElement", "HtmlSnapshot", "is_hidden", "render_text"]
