"""linemark renderers.

Available Renderers:
- HtmlLineRenderer: Renders one tokenized line to inline-styled HTML

"""

from linemark.renderers.html import HtmlLineRenderer, html_escape, render_line, segments

__all__ = ["HtmlLineRenderer", "html_escape", "render_line", "segments"]
