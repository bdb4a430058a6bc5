"""Image, font and glyph assets referenced by layers."""

from dataclasses import dataclass
from typing import Optional, Tuple

from lottiekit.model.shape import ShapeGroup


@dataclass(frozen=True)
class ImageAsset:
    """A bitmap referenced by image layers.

    The file itself is never loaded here; dir_name + file_name tell the host
    where to find it.
    """
    id: str
    width: int
    height: int
    file_name: str
    dir_name: str = ""

    @property
    def path(self) -> str:
        return f"{self.dir_name}{self.file_name}"

    @property
    def is_embedded(self) -> bool:
        """True for inline data URIs."""
        return self.file_name.startswith("data:")


@dataclass(frozen=True)
class Font:
    name: str
    family: str
    style: str
    ascent: float = 0.0


CharacterKey = Tuple[str, str, str]


@dataclass(frozen=True)
class FontCharacter:
    """Outline of one glyph of a font, for text layers rendered from glyphs."""
    character: str
    size: float
    width: float
    style: str
    font_family: str
    shapes: Tuple[ShapeGroup, ...] = ()

    @property
    def key(self) -> CharacterKey:
        return character_key(self.character, self.font_family, self.style)


def character_key(character: str, font_family: str, style: Optional[str]) -> CharacterKey:
    return (character, font_family, style or "")
