"""Page content extractors."""

from .seo import SeoExtractor

__all__ = ["SeoExtractor"]
