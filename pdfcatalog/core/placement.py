from __future__ import annotations
from typing import Optional, Tuple

from .types import Position
from .errors import InvalidInput

def page_number_anchor(
    page_index: int,
    position: Position,
    page_width: float,
    margin_x: float = 50,
    offset_y: float = 30,
) -> Optional[Tuple[float, float]]:
    """(x, y) where the page number of page_index (0-based) is drawn.

    y is measured from the bottom edge. Returns None when nothing is stamped.
    outside/inside alternate by parity like book binding: page index 0 is a
    recto page, so its outside edge is on the right.
    """
    left = margin_x
    right = page_width - margin_x
    even = page_index % 2 == 0

    if position == "none":
        return None
    if position == "left":
        x = left
    elif position == "right":
        x = right
    elif position == "outside":
        x = right if even else left
    elif position == "inside":
        x = left if even else right
    else:
        raise InvalidInput(f"Unknown page number position: {position}")
    return (x, offset_y)
