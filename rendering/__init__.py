"""Document rendering for the preview pane."""

from rendering.renderer import render

__all__ = ["render"]
