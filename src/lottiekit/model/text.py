"""Text document data carried by text layers."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

Color = Tuple[float, float, float, float]


class Justification(Enum):
    """Text alignment ("j" in the source)."""
    LEFT_ALIGN = 0
    RIGHT_ALIGN = 1
    CENTER = 2


@dataclass(frozen=True)
class DocumentData:
    """One keyframe's worth of text and its styling."""
    text: str
    font_name: str
    size: float
    justification: Justification = Justification.LEFT_ALIGN
    tracking: int = 0
    line_height: float = 0.0
    baseline_shift: float = 0.0
    fill_color: Optional[Color] = None
    stroke_color: Optional[Color] = None
    stroke_width: float = 0.0
    stroke_over_fill: bool = True
