"""
PipelineLib - End-to-end strip rendering
"""

from PS_Libs.PipelineLib.strip_pipeline import (
    PhotoSelection,
    StripPipeline,
    StripRequest,
    StripResult,
)

__all__ = [
    "PhotoSelection",
    "StripPipeline",
    "StripRequest",
    "StripResult",
]
