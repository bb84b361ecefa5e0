import logging
from typing import Callable, Optional

from .layout import PipelineLayout

logger = logging.getLogger(__name__)


class HoverController:
    """Tracks which unit is highlighted on the pipeline graph.

    Two states: idle (`highlighted is None`) and highlighting a unit index.
    `on_highlight(layout, index)` is called only when the pointer lands on a
    different unit; it is expected to clear and redraw the overlay layer.
    """

    def __init__(self, on_highlight: Callable[[PipelineLayout, int], None]):
        self.on_highlight = on_highlight
        self.highlighted: Optional[int] = None

    def reset(self):
        # Full renders clear the overlay, so the cache has to follow.
        self.highlighted = None

    def pointer_moved(self, layout: Optional[PipelineLayout], x: float, y: float) -> bool:
        """Handle a pointer move in surface coordinates. Returns True if the overlay was redrawn."""
        if layout is None:
            return False
        index = layout.hit_test(x, y)
        if index is None or index == self.highlighted:
            return False

        logger.debug("highlight unit %s (was %s)", index, self.highlighted)
        self.highlighted = index
        self.on_highlight(layout, index)
        return True
