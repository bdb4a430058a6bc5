"""
Composition parsing.

The root state reads the header fields, and the composition is created as
soon as "layers" is reached. Asset, font and glyph tables are allocated up
front so they can be filled whether they appear before or after the layers.
"""

from typing import Dict, Optional
import logging

from lottiekit.config.settings import Settings, get_settings
from lottiekit.errors import InvalidFieldError
from lottiekit.model.assets import CharacterKey, Font, FontCharacter, ImageAsset
from lottiekit.model.composition import Composition, Rect, Version, WarningSet
from lottiekit.model.layer import LayerList, LayerType
from lottiekit.model.shape import ShapeGroup
from lottiekit.parser.layer import parse_layer
from lottiekit.parser.reader import JsonReader
from lottiekit.parser.shapes import parse_content_list
from lottiekit.parser.values import ParseContext

logger = logging.getLogger(__name__)

HEADER_FIELDS = ("w", "h", "ip", "op", "fr", "v")

IMAGE_LAYERS_WARNING = (
    "Lottie should primarily be used with shapes. If you are using Adobe "
    "Illustrator, convert the Illustrator layers to shape layers."
)


def parse_version(text: str, path: str = "$.v") -> Version:
    """Parse "major.minor.patch"; missing minor/patch default to 0."""
    parts = str(text).strip().split(".")
    try:
        numbers = [int(part) for part in parts[:3]]
    except ValueError as e:
        raise InvalidFieldError(f"Invalid version {text!r}", path) from e
    while len(numbers) < 3:
        numbers.append(0)
    return Version(*numbers)


class CompositionParser:
    """Builds one Composition from one document.

    A parser instance is single use and not thread safe.
    """

    def __init__(self, scale: float = 1.0, settings: Optional[Settings] = None):
        if scale <= 0:
            raise ValueError(f"Scale must be positive, got {scale}")
        self.settings = settings or get_settings()
        self.scale = scale

        self.warnings = WarningSet()
        self.context = ParseContext(scale=scale, warnings=self.warnings)
        self.layers = LayerList()
        self.precomps: Dict[str, LayerList] = {}
        self.images: Dict[str, ImageAsset] = {}
        self.fonts: Dict[str, Font] = {}
        self.characters: Dict[CharacterKey, FontCharacter] = {}

    def parse(self, reader: JsonReader) -> Composition:
        header: Dict[str, object] = {}
        composition: Optional[Composition] = None

        reader.begin_object()
        while reader.has_next():
            name = reader.next_name()
            if name in HEADER_FIELDS and composition is not None:
                self.warnings.add(f"Ignoring header field '{name}' after layers")
                reader.skip_value()
            elif name in ("w", "h"):
                header[name] = int(reader.next_double())
            elif name in ("ip", "op", "fr"):
                header[name] = reader.next_double()
                if name == "op":
                    self.context.end_frame = header[name]
            elif name == "v":
                path = reader.path
                header[name] = self.context.version = parse_version(reader.next_string(), path)
            elif name == "layers":
                if composition is not None:
                    raise InvalidFieldError("Duplicate 'layers' field", reader.path)
                composition = self._create_composition(header, reader.path)
                self._parse_layer_list(reader, self.layers, "composition")
            elif name == "assets":
                self._parse_assets(reader)
            elif name == "fonts":
                self._parse_fonts(reader)
            elif name == "chars":
                self._parse_chars(reader)
            else:
                reader.skip_value()
        reader.end_object()

        if composition is None:
            raise InvalidFieldError("Composition has no 'layers'", "$")

        logger.debug(
            f"Parsed composition: {len(self.layers)} layers, {len(self.precomps)} precomps, "
            f"{len(self.images)} images, {len(self.fonts)} fonts, "
            f"{len(self.characters)} characters, {len(self.warnings)} warnings"
        )
        return composition

    def _create_composition(self, header: Dict[str, object], path: str) -> Composition:
        missing = [field for field in HEADER_FIELDS if field not in header]
        if missing:
            raise InvalidFieldError(
                f"Header fields {', '.join(missing)} must precede 'layers'", path
            )

        frame_rate = header["fr"]
        if frame_rate <= 0:
            raise InvalidFieldError(f"Frame rate must be positive, got {frame_rate}", "$.fr")

        version = header["v"]

        bounds = Rect(0, 0, int(header["w"] * self.scale), int(header["h"] * self.scale))
        return Composition(
            bounds=bounds,
            start_frame=header["ip"],
            end_frame=header["op"],
            frame_rate=frame_rate,
            scale=self.scale,
            version=version,
            layers=self.layers,
            precomps=self.precomps,
            images=self.images,
            fonts=self.fonts,
            characters=self.characters,
            warnings=self.warnings,
            min_supported_version=Version(*self.settings.parser.min_supported_version),
        )

    # Layer lists

    def _parse_layer_list(self, reader: JsonReader, target: LayerList, scope: str) -> None:
        threshold = self.settings.parser.image_layer_warning_threshold
        image_count = 0

        reader.begin_array()
        while reader.has_next():
            layer = parse_layer(reader, self.context)
            if layer.type is LayerType.IMAGE:
                image_count += 1
            if not target._append(layer):
                self.warnings.add(f"Duplicate layer id {layer.id} in {scope}")
        reader.end_array()

        if image_count > threshold:
            self.warnings.add(IMAGE_LAYERS_WARNING)

    # Assets

    def _parse_assets(self, reader: JsonReader) -> None:
        reader.begin_array()
        while reader.has_next():
            self._parse_asset(reader)
        reader.end_array()

    def _parse_asset(self, reader: JsonReader) -> None:
        """An asset with "layers" is a precomp, one with "p" is an image."""
        path = reader.path
        asset_id: Optional[str] = None
        layers: Optional[LayerList] = None
        file_name: Optional[str] = None
        dir_name = ""
        width = height = 0

        reader.begin_object()
        while reader.has_next():
            name = reader.next_name()
            if name == "id":
                asset_id = reader.next_string()
            elif name == "layers":
                layers = LayerList()
                self._parse_layer_list(reader, layers, f"precomp at {path}")
            elif name == "p":
                file_name = reader.next_string()
            elif name == "u":
                dir_name = reader.next_string()
            elif name == "w":
                width = int(reader.next_double())
            elif name == "h":
                height = int(reader.next_double())
            else:
                reader.skip_value()
        reader.end_object()

        if layers is None and file_name is None:
            logger.debug(f"Skipping asset {asset_id!r}: neither precomp nor image")
            return
        if asset_id is None:
            raise InvalidFieldError("Asset has no 'id'", path)
        if layers is not None:
            self.precomps[asset_id] = layers
        else:
            self.images[asset_id] = ImageAsset(
                id=asset_id,
                width=width,
                height=height,
                file_name=file_name,
                dir_name=dir_name,
            )

    # Fonts and glyphs

    def _parse_fonts(self, reader: JsonReader) -> None:
        reader.begin_object()
        while reader.has_next():
            if reader.next_name() != "list":
                reader.skip_value()
                continue
            reader.begin_array()
            while reader.has_next():
                font = self._parse_font(reader)
                self.fonts[font.name] = font
            reader.end_array()
        reader.end_object()

    def _parse_font(self, reader: JsonReader) -> Font:
        path = reader.path
        name = family = None
        style = ""
        ascent = 0.0

        reader.begin_object()
        while reader.has_next():
            field = reader.next_name()
            if field == "fName":
                name = reader.next_string()
            elif field == "fFamily":
                family = reader.next_string()
            elif field == "fStyle":
                style = reader.next_string()
            elif field == "ascent":
                ascent = reader.next_double()
            else:
                reader.skip_value()
        reader.end_object()

        if name is None:
            raise InvalidFieldError("Font has no 'fName'", path)
        return Font(name=name, family=family or name, style=style, ascent=ascent)

    def _parse_chars(self, reader: JsonReader) -> None:
        reader.begin_array()
        while reader.has_next():
            character = self._parse_char(reader)
            self.characters[character.key] = character
        reader.end_array()

    def _parse_char(self, reader: JsonReader) -> FontCharacter:
        path = reader.path
        character = None
        size = width = 0.0
        style = ""
        family = ""
        shapes = []

        reader.begin_object()
        while reader.has_next():
            field = reader.next_name()
            if field == "ch":
                character = reader.next_string()
            elif field == "size":
                size = reader.next_double()
            elif field == "w":
                width = reader.next_double()
            elif field == "style":
                style = reader.next_string()
            elif field == "fFamily":
                family = reader.next_string()
            elif field == "data":
                reader.begin_object()
                while reader.has_next():
                    if reader.next_name() == "shapes":
                        shapes = parse_content_list(reader, self.context)
                    else:
                        reader.skip_value()
                reader.end_object()
            else:
                reader.skip_value()
        reader.end_object()

        if character is None:
            raise InvalidFieldError("Glyph has no character 'ch'", path)
        return FontCharacter(
            character=character,
            size=size,
            width=width,
            style=style,
            font_family=family,
            shapes=tuple(shape for shape in shapes if isinstance(shape, ShapeGroup)),
        )
