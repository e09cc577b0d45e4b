"""Media collaborators"""

from .probe import FFprobeCanvasProbe, resolve_canvas_size

__all__ = ["FFprobeCanvasProbe", "resolve_canvas_size"]
