"""
Composition model.

The finished result of a parse: header data, the layer tree, asset tables
and warnings. Built once by the parser and read-only afterwards, except for
the warning set, which consumers may keep appending to.
"""

from types import MappingProxyType
from typing import Dict, List, Mapping, NamedTuple, Optional
import logging
import threading

from lottiekit.model.assets import CharacterKey, Font, FontCharacter, ImageAsset, character_key
from lottiekit.model.layer import Layer, LayerList
from lottiekit.utils.performance import PerformanceTracker

logger = logging.getLogger(__name__)


class Rect(NamedTuple):
    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top


class Version(NamedTuple):
    """Bodymovin exporter version."""
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


MIN_SUPPORTED_VERSION = Version(4, 5, 0)


class WarningSet:
    """Thread-safe, de-duplicated, insertion-ordered warning log."""

    def __init__(self) -> None:
        self._warnings: Dict[str, None] = {}
        self._lock = threading.Lock()

    def add(self, warning: str) -> bool:
        """Record a warning.

        Returns:
            True if the text was not recorded before
        """
        with self._lock:
            if warning in self._warnings:
                return False
            self._warnings[warning] = None
        logger.warning(warning)
        return True

    def snapshot(self) -> List[str]:
        with self._lock:
            return list(self._warnings)

    def __contains__(self, warning: object) -> bool:
        with self._lock:
            return warning in self._warnings

    def __len__(self) -> int:
        with self._lock:
            return len(self._warnings)


class Composition:
    """A parsed After Effects / Bodymovin animation.

    Layers and asset tables are exposed as read-only views. The parser fills
    the underlying tables while it finishes reading the document.
    """

    def __init__(
        self,
        bounds: Rect,
        start_frame: float,
        end_frame: float,
        frame_rate: float,
        scale: float = 1.0,
        version: Version = MIN_SUPPORTED_VERSION,
        layers: Optional[LayerList] = None,
        precomps: Optional[Dict[str, LayerList]] = None,
        images: Optional[Dict[str, ImageAsset]] = None,
        fonts: Optional[Dict[str, Font]] = None,
        characters: Optional[Dict[CharacterKey, FontCharacter]] = None,
        warnings: Optional[WarningSet] = None,
        min_supported_version: Version = MIN_SUPPORTED_VERSION,
    ):
        self._bounds = bounds
        self._start_frame = start_frame
        self._end_frame = end_frame
        self._frame_rate = frame_rate
        self._scale = scale
        self._version = version

        self._layers = layers if layers is not None else LayerList()
        self._precomps = precomps if precomps is not None else {}
        self._images = images if images is not None else {}
        self._fonts = fonts if fonts is not None else {}
        self._characters = characters if characters is not None else {}
        self._warnings = warnings if warnings is not None else WarningSet()
        self._performance_tracker = PerformanceTracker()

        if not self.is_at_least_version(*min_supported_version):
            self.add_warning(
                f"Lottie only supports bodymovin >= {min_supported_version} "
                f"(this file was exported with {version})"
            )

    # Header

    @property
    def bounds(self) -> Rect:
        return self._bounds

    @property
    def start_frame(self) -> float:
        return self._start_frame

    @property
    def end_frame(self) -> float:
        return self._end_frame

    @property
    def frame_rate(self) -> float:
        return self._frame_rate

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def version(self) -> Version:
        return self._version

    def is_at_least_version(self, major: int, minor: int, patch: int) -> bool:
        return self._version >= (major, minor, patch)

    @property
    def duration_millis(self) -> float:
        """Duration in whole milliseconds."""
        frames = self._end_frame - self._start_frame
        return float(int(frames / self._frame_rate * 1000))

    @property
    def duration_frames(self) -> float:
        return self.duration_millis * self._frame_rate / 1000.0

    # Layers

    @property
    def layers(self) -> LayerList:
        return self._layers

    def layer_by_id(self, layer_id: int) -> Optional[Layer]:
        """Look up a top-level layer."""
        return self._layers.by_id(layer_id)

    def precomp_by_name(self, name: str) -> Optional[LayerList]:
        return self._precomps.get(name)

    @property
    def precomps(self) -> Mapping[str, LayerList]:
        return MappingProxyType(self._precomps)

    # Assets

    @property
    def images(self) -> Mapping[str, ImageAsset]:
        return MappingProxyType(self._images)

    @property
    def has_images(self) -> bool:
        return bool(self._images)

    @property
    def fonts(self) -> Mapping[str, Font]:
        return MappingProxyType(self._fonts)

    @property
    def characters(self) -> Mapping[CharacterKey, FontCharacter]:
        return MappingProxyType(self._characters)

    def character_for(self, character: str, font_family: str, style: str) -> Optional[FontCharacter]:
        return self._characters.get(character_key(character, font_family, style))

    # Warnings

    def add_warning(self, warning: str) -> None:
        self._warnings.add(warning)

    @property
    def warnings(self) -> List[str]:
        """Snapshot of the warnings recorded so far."""
        return self._warnings.snapshot()

    # Performance tracking

    @property
    def performance_tracker(self) -> PerformanceTracker:
        return self._performance_tracker

    def set_performance_tracking_enabled(self, enabled: bool) -> None:
        self._performance_tracker.enabled = enabled

    def __repr__(self) -> str:
        return (
            f"Composition(bounds={self._bounds}, frames={self._start_frame}-{self._end_frame}, "
            f"fps={self._frame_rate}, version={self._version}, layers={len(self._layers)})"
        )

    def __str__(self) -> str:
        parts = ["Composition:\n"]
        for layer in self._layers:
            parts.append(layer.describe(self._layers, "\t"))
        return "".join(parts)
