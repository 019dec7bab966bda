"""Image loading for embedding."""

from .images import DecodedImage, ImageDecoder, ImageResource, PillowImageDecoder, load_image

__all__ = ["DecodedImage", "ImageDecoder", "ImageResource", "PillowImageDecoder", "load_image"]
