"""
Frame templates.

A frame template describes a photo strip layout: the canvas size, the frame
art drawn behind the photos and the ordered windows each photo fills.

The JSON form is a stable external contract::

    {
        "frame": "designs/4shot-design1.png",
        "frameWidth": 400,
        "frameHeight": 700,
        "windows": [{"left": 50, "top": 50, "width": 300, "height": 120,
                     "borderRadius": 5}, ...]
    }

Changing a shipped template's geometry changes historical composites, so
shipped entries are treated as versioned data.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from PS_Libs.constants import (
    FALLBACK_CORNER_RADIUS,
    FALLBACK_FRAME_COLOR,
    FALLBACK_STRIP_WIDTH,
    FIELD_BACKGROUND_COLOR,
    FIELD_BORDER_RADIUS,
    FIELD_CORNER_RADIUS,
    FIELD_FRAME,
    FIELD_FRAME_HEIGHT,
    FIELD_FRAME_WIDTH,
    FIELD_HEIGHT,
    FIELD_LEFT,
    FIELD_OVERLAY,
    FIELD_TOP,
    FIELD_WIDTH,
    FIELD_WINDOWS,
)
from PS_Libs.ImageEditingLib.image_models import RgbaColor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Window:
    """Rectangle inside a frame where one photo is drawn.

    Attributes:
        left, top: Top-left corner in frame pixels
        width, height: Size in frame pixels (> 0)
        corner_radius: Optional rounded-corner radius in pixels
    """
    left: int
    top: int
    width: int
    height: int
    corner_radius: Optional[float] = None

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Window size must be positive, got {self.width}x{self.height}")
        if self.corner_radius is not None and self.corner_radius < 0:
            raise ValueError(f"corner_radius must be >= 0, got {self.corner_radius}")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """(left, top, right, bottom) in frame pixels."""
        return self.left, self.top, self.left + self.width, self.top + self.height

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            FIELD_LEFT: self.left,
            FIELD_TOP: self.top,
            FIELD_WIDTH: self.width,
            FIELD_HEIGHT: self.height,
        }
        if self.corner_radius is not None:
            data[FIELD_CORNER_RADIUS] = self.corner_radius
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Window":
        """Create from a window record; accepts cornerRadius or borderRadius."""
        radius = data.get(FIELD_CORNER_RADIUS, data.get(FIELD_BORDER_RADIUS))
        return cls(
            left=int(data[FIELD_LEFT]),
            top=int(data[FIELD_TOP]),
            width=int(data[FIELD_WIDTH]),
            height=int(data[FIELD_HEIGHT]),
            corner_radius=float(radius) if radius is not None else None,
        )


def _parse_color(value: Any) -> RgbaColor:
    try:
        channels = [int(c) for c in value]
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid RGBA color: {value!r}") from e
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4 or not all(0 <= c <= 255 for c in channels):
        raise ValueError(f"Invalid RGBA color: {value!r}")
    return tuple(channels)


@dataclass(frozen=True)
class FrameTemplate:
    """A named strip layout.

    Attributes:
        id: Template id (e.g. "4shot-design1")
        frame_width, frame_height: Output canvas size in pixels
        windows: Ordered photo windows
        frame_image: Reference to the background frame art (path), if any
        overlay_image: Optional art drawn on top of the photos
        background_color: Fill used when no frame art is available
    """
    id: str
    frame_width: int
    frame_height: int
    windows: Tuple[Window, ...] = ()
    frame_image: Optional[str] = None
    overlay_image: Optional[str] = None
    background_color: RgbaColor = FALLBACK_FRAME_COLOR

    def __post_init__(self):
        if self.frame_width <= 0 or self.frame_height <= 0:
            raise ValueError(
                f"Frame size must be positive, got {self.frame_width}x{self.frame_height}"
            )
        object.__setattr__(self, "windows", tuple(self.windows))

    @property
    def shot_count(self) -> int:
        return len(self.windows)

    @property
    def size(self) -> Tuple[int, int]:
        return self.frame_width, self.frame_height

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            FIELD_FRAME_WIDTH: self.frame_width,
            FIELD_FRAME_HEIGHT: self.frame_height,
            FIELD_WINDOWS: [window.to_dict() for window in self.windows],
        }
        if self.frame_image is not None:
            data[FIELD_FRAME] = self.frame_image
        if self.overlay_image is not None:
            data[FIELD_OVERLAY] = self.overlay_image
        if self.background_color != FALLBACK_FRAME_COLOR:
            data[FIELD_BACKGROUND_COLOR] = list(self.background_color)
        return data

    @classmethod
    def from_dict(cls, template_id: str, data: Dict[str, Any]) -> "FrameTemplate":
        """Create from the external JSON record."""
        try:
            windows = tuple(Window.from_dict(w) for w in data.get(FIELD_WINDOWS, []))
            background = data.get(FIELD_BACKGROUND_COLOR)
            return cls(
                id=template_id,
                frame_width=int(data[FIELD_FRAME_WIDTH]),
                frame_height=int(data[FIELD_FRAME_HEIGHT]),
                windows=windows,
                frame_image=data.get(FIELD_FRAME),
                overlay_image=data.get(FIELD_OVERLAY),
                background_color=(
                    _parse_color(background) if background is not None else FALLBACK_FRAME_COLOR
                ),
            )
        except KeyError as e:
            raise ValueError(f"Template '{template_id}' is missing field {e}") from e


def create_fallback_template(shot_count: int) -> FrameTemplate:
    """
    Classic single-column layout used when no designed template exists.

    One shot gets a large 350x400 window; more shots stack 120x120 windows
    130 px apart.
    """
    if shot_count < 1:
        raise ValueError(f"shot_count must be >= 1, got {shot_count}")

    if shot_count == 1:
        windows = (Window(25, 100, 350, 400, FALLBACK_CORNER_RADIUS),)
        height = 600
    else:
        windows = tuple(
            Window(140, 80 + index * 130, 120, 120, FALLBACK_CORNER_RADIUS)
            for index in range(shot_count)
        )
        height = shot_count * 150 + 100

    return FrameTemplate(
        id=f"{shot_count}shot-fallback",
        frame_width=FALLBACK_STRIP_WIDTH,
        frame_height=height,
        windows=windows,
    )


def _stack(left: int, top: int, width: int, height: int, radius: float,
           count: int, pitch: int) -> Tuple[Window, ...]:
    return tuple(Window(left, top + i * pitch, width, height, radius) for i in range(count))


def _grid(left: int, top: int, width: int, height: int, radius: float,
          col_pitch: int, row_pitch: int, rows: int = 3) -> Tuple[Window, ...]:
    return tuple(
        Window(left + col * col_pitch, top + row * row_pitch, width, height, radius)
        for row in range(rows)
        for col in range(2)
    )


def _design(template_id: str, width: int, height: int,
            windows: Tuple[Window, ...]) -> FrameTemplate:
    return FrameTemplate(
        id=template_id,
        frame_width=width,
        frame_height=height,
        windows=windows,
        frame_image=f"designs/{template_id}.png",
    )


_ONE_SHOT = (
    (50, 50, 300, 450, 10), (40, 60, 320, 440, 15), (60, 40, 280, 460, 8),
    (45, 55, 310, 450, 12), (55, 45, 290, 470, 6), (50, 50, 300, 450, 20),
    (35, 65, 330, 430, 5), (65, 35, 270, 480, 18), (50, 50, 300, 450, 25),
    (40, 40, 320, 470, 3),
)
_THREE_SHOT = (
    (50, 50, 300, 150, 5), (40, 60, 320, 140, 8), (60, 40, 280, 160, 12),
    (45, 55, 310, 145, 3), (55, 45, 290, 155, 15),
)
_FOUR_SHOT = (
    (50, 50, 300, 120, 5), (40, 60, 320, 110, 8), (60, 40, 280, 130, 12),
    (45, 55, 310, 115, 3), (55, 45, 290, 125, 20),
)
_SIX_SHOT = (
    (20, 20, 160, 120, 5, 200), (25, 25, 150, 110, 8, 200), (15, 15, 170, 130, 12, 200),
)


def build_default_templates() -> List[FrameTemplate]:
    """The shipped 1, 3, 4 and 6 shot designs."""
    templates = []
    for index, (left, top, width, height, radius) in enumerate(_ONE_SHOT, start=1):
        templates.append(_design(f"1shot-design{index}", 400, 600,
                                 (Window(left, top, width, height, radius),)))
    for index, (left, top, width, height, radius) in enumerate(_THREE_SHOT, start=1):
        templates.append(_design(f"3shot-design{index}", 400, 650,
                                 _stack(left, top, width, height, radius, 3, 200)))
    for index, (left, top, width, height, radius) in enumerate(_FOUR_SHOT, start=1):
        templates.append(_design(f"4shot-design{index}", 400, 700,
                                 _stack(left, top, width, height, radius, 4, 150)))
    for index, (left, top, width, height, radius, col_pitch) in enumerate(_SIX_SHOT, start=1):
        templates.append(_design(f"6shot-design{index}", 400, 500,
                                 _grid(left, top, width, height, radius, col_pitch, 150)))
    return templates


class FrameTemplateCatalog:
    """
    Templates keyed by id.

    Example:
        >>> catalog = FrameTemplateCatalog.default()
        >>> catalog.get("4shot-design1").shot_count
        4
    """

    def __init__(self, templates: Optional[List[FrameTemplate]] = None):
        self._templates: Dict[str, FrameTemplate] = {}
        for template in templates or []:
            self.add(template)

    @classmethod
    def default(cls) -> "FrameTemplateCatalog":
        return cls(build_default_templates())

    def add(self, template: FrameTemplate) -> None:
        if template.id in self._templates:
            raise RuntimeError(f"Template '{template.id}' is already registered.")
        self._templates[template.id] = template

    def get(self, template_id: str) -> FrameTemplate:
        """
        Raises:
            KeyError: If template_id is not registered
        """
        if template_id not in self._templates:
            raise KeyError(
                f"No frame template '{template_id}'. "
                f"Available templates: {', '.join(self.list_ids())}"
            )
        return self._templates[template_id]

    def get_or_fallback(self, template_id: str, shot_count: int) -> FrameTemplate:
        """Get a template, or the classic fallback layout when it is missing."""
        template = self._templates.get(template_id)
        if template is None:
            logger.warning(
                f"Frame template '{template_id}' not found; using {shot_count}-shot fallback"
            )
            return create_fallback_template(shot_count)
        return template

    def by_shots(self, shot_count: int) -> List[FrameTemplate]:
        return [t for t in self._templates.values() if t.shot_count == shot_count]

    def list_ids(self) -> List[str]:
        return sorted(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def load_json(self, path: Path) -> int:
        """
        Add every template from a JSON file mapping id -> template record.

        Returns:
            Number of templates loaded

        Raises:
            OSError: If the file cannot be read
            ValueError: If the JSON or a record is malformed
            RuntimeError: If a template id is already registered
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid template JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Template file {path} must contain an object keyed by id")

        # all records parse before any is added
        templates = [FrameTemplate.from_dict(template_id, record) for template_id, record in data.items()]
        clashes = [t.id for t in templates if t.id in self._templates]
        if clashes:
            raise RuntimeError(f"Templates already registered: {', '.join(clashes)}")
        for template in templates:
            self.add(template)

        logger.info(f"Loaded {len(data)} frame templates from {path}")
        return len(data)
