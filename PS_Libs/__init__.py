"""
PS_Libs - Photo Strip Studio Library Modules

This package contains the image pipeline of the photo strip booth,
organized into specialized sub-packages:

- ImageEditingLib: Raster model, color math, adjustments, convolution and artistic effects
- FilterLib: Filter catalog, presets and the caching filter engine
- FrameLib: Frame templates and the frame compositor
- PrintLib: Print formats, settings validation and the print rasterizer
- PipelineLib: End-to-end strip rendering for a capture session
"""

__version__ = "0.1.0"
