"""
FrameLib - Strip layouts and compositing

Frame templates describe where each photo goes; the compositor draws them.
"""

from PS_Libs.FrameLib.frame_templates import (
    FrameTemplate,
    FrameTemplateCatalog,
    Window,
    build_default_templates,
    create_fallback_template,
)
from PS_Libs.FrameLib.frame_compositor import (
    FrameCompositor,
    compute_cover_crop,
    rounded_mask,
)

__all__ = [
    "FrameTemplate",
    "FrameTemplateCatalog",
    "Window",
    "build_default_templates",
    "create_fallback_template",
    "FrameCompositor",
    "compute_cover_crop",
    "rounded_mask",
]
