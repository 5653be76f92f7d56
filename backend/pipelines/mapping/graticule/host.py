"""
Host View Contract
Minimal map-view surface the graticule attaches to: a post-composition
render event, redraw requests, and change observers.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Protocol, Tuple

from pipelines.mapping.extent import Extent
from pipelines.mapping.projection import Projection

logger = logging.getLogger(__name__)


class Subscription:
    """Handle returned by a registration; ``unsubscribe`` detaches exactly once."""

    def __init__(self, detach: Callable[[], None]):
        self._detach: Optional[Callable[[], None]] = detach

    @property
    def active(self) -> bool:
        return self._detach is not None

    def unsubscribe(self) -> bool:
        """Detach the listener. Returns False if it was already detached."""
        if self._detach is None:
            return False
        detach, self._detach = self._detach, None
        detach()
        return True


class Observable:
    """Objects that notify listeners when they change."""

    def __init__(self):
        self._change_listeners: List[Callable[[Any], None]] = []
        self.revision = 0

    def on_change(self, listener: Callable[[Any], None]) -> Subscription:
        self._change_listeners.append(listener)
        return Subscription(lambda: self._change_listeners.remove(listener))

    def changed(self) -> None:
        self.revision += 1
        for listener in list(self._change_listeners):
            listener(self)


@dataclass(frozen=True)
class FrameState:
    """View state exposed to post-composition listeners."""

    extent: Extent
    center: Tuple[float, float]
    projection: Projection
    resolution: float
    pixel_ratio: float = 1.0


class VectorContext(Protocol):
    def set_fill_stroke_style(self, fill: Any, stroke: Any) -> None:
        ...

    def draw_line_string(self, line: Any) -> None:
        ...


@dataclass
class RecordingVectorContext:
    """VectorContext that records draw calls instead of rasterising them."""

    stroke: Any = None
    fill: Any = None
    drawn: List[Tuple[Any, Any]] = field(default_factory=list)

    def set_fill_stroke_style(self, fill: Any, stroke: Any) -> None:
        self.fill = fill
        self.stroke = stroke

    def draw_line_string(self, line: Any) -> None:
        # lines are reused between frames, keep a copy
        snapshot = line.copy() if hasattr(line, "copy") else line
        self.drawn.append((snapshot, self.stroke))


@dataclass(frozen=True)
class RenderEvent:
    frame_state: FrameState
    vector_context: VectorContext


class MapView(Observable):
    """
    In-process host view. ``compose`` plays one render frame: every
    post-composition listener receives a RenderEvent for it.
    """

    def __init__(self, name: str = "map"):
        super().__init__()
        self.name = name
        self.render_requests = 0
        self._postcompose_listeners: List[Callable[[RenderEvent], None]] = []

    def on_postcompose(self, listener: Callable[[RenderEvent], None]) -> Subscription:
        self._postcompose_listeners.append(listener)
        return Subscription(lambda: self._postcompose_listeners.remove(listener))

    @property
    def listener_count(self) -> int:
        return len(self._postcompose_listeners)

    def render(self) -> None:
        """Request a redraw."""
        self.render_requests += 1
        logger.debug(f"🖼️ Render requested on {self.name} ({self.render_requests})")

    def compose(self, frame_state: FrameState, vector_context: Optional[VectorContext] = None) -> VectorContext:
        if vector_context is None:
            vector_context = RecordingVectorContext()
        event = RenderEvent(frame_state, vector_context)
        for listener in list(self._postcompose_listeners):
            listener(event)
        return vector_context

    def __repr__(self) -> str:
        return f"MapView({self.name!r})"
