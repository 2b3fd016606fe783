from .render import GLYPHS, LiveDisplay, build_view, format_duration, status_row

__all__ = ["GLYPHS", "LiveDisplay", "build_view", "format_duration", "status_row"]
