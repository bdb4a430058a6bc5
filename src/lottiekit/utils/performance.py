"""Per-layer render time tracking.

Disabled by default. When enabled, renderers report how long each layer
took to draw and registered frame listeners are notified of every frame's
total render time.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple
import logging
import threading

logger = logging.getLogger(__name__)

FrameListener = Callable[[float], None]


@dataclass
class MeanCalculator:
    """Running mean of recorded samples."""
    total: float = 0.0
    count: int = 0

    def add(self, value: float) -> None:
        self.total += value
        self.count += 1
        # Keep the sum from growing without bound
        if self.count == 2 ** 31 - 1:
            self.total /= 2.0
            self.count //= 2

    @property
    def mean(self) -> float:
        if self.count == 0:
            return 0.0
        return self.total / self.count


class PerformanceTracker:
    """Collects render timings for one composition."""

    def __init__(self) -> None:
        self._enabled = False
        self._listeners: List[FrameListener] = []
        self._layer_render_times: Dict[str, MeanCalculator] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    def record_render_time(self, layer_name: str, millis: float) -> None:
        """Record how long a layer (or "__container" for a whole frame) took."""
        if not self._enabled:
            return
        with self._lock:
            calculator = self._layer_render_times.setdefault(layer_name, MeanCalculator())
            calculator.add(millis)
            listeners = list(self._listeners)

        if layer_name == "__container":
            for listener in listeners:
                try:
                    listener(millis)
                except Exception as e:
                    logger.error(f"Frame listener failed: {e}")

    def add_frame_listener(self, listener: FrameListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_frame_listener(self, listener: FrameListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def clear_render_times(self) -> None:
        with self._lock:
            self._layer_render_times.clear()

    def sorted_render_times(self) -> List[Tuple[str, float]]:
        """Mean render time per layer, slowest first."""
        if not self._enabled:
            return []
        with self._lock:
            times = [(name, calc.mean) for name, calc in self._layer_render_times.items()]
        return sorted(times, key=lambda item: item[1], reverse=True)

    def log_render_times(self) -> None:
        if not self._enabled:
            return
        times = self.sorted_render_times()
        logger.debug("Render times:")
        for name, mean in times:
            logger.debug(f"\t\t{name:>30}:{mean:.2f}")
