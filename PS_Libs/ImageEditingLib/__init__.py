"""
ImageEditingLib - Core image processing functionality

This module provides the raster model, color math, the adjustment engine,
convolution and artistic effects for the Photo Strip Studio project.
"""

from PS_Libs.ImageEditingLib.image_models import RasterImage, RgbaColor
from PS_Libs.ImageEditingLib.image_io import (
    decode_image,
    get_save_kwargs,
    save_raster,
    save_session_images,
)
from PS_Libs.ImageEditingLib.color_model import (
    hsl_to_rgb,
    rgb_to_hsl,
)
from PS_Libs.ImageEditingLib.adjustments import (
    ADJUSTMENT_ORDER,
    AdjustmentParameters,
    adjust_brightness,
    adjust_contrast,
    adjust_exposure,
    adjust_highlights,
    adjust_hue,
    adjust_saturation,
    adjust_shadows,
    apply_adjustments,
)
from PS_Libs.ImageEditingLib.convolution import KERNELS, Kernel, convolve, get_kernel
from PS_Libs.ImageEditingLib.artistic_effects import (
    ArtisticEffect,
    EffectKind,
    apply_effect,
    oil_painting,
    pencil_sketch,
    watercolor,
)

__all__ = [
    "RasterImage",
    "RgbaColor",
    "decode_image",
    "get_save_kwargs",
    "save_raster",
    "save_session_images",
    "hsl_to_rgb",
    "rgb_to_hsl",
    "ADJUSTMENT_ORDER",
    "AdjustmentParameters",
    "adjust_brightness",
    "adjust_contrast",
    "adjust_exposure",
    "adjust_highlights",
    "adjust_hue",
    "adjust_saturation",
    "adjust_shadows",
    "apply_adjustments",
    "KERNELS",
    "Kernel",
    "convolve",
    "get_kernel",
    "ArtisticEffect",
    "EffectKind",
    "apply_effect",
    "oil_painting",
    "pencil_sketch",
    "watercolor",
]
