"""Package extraction — derives the normalized slide model from .pptx bytes.

Walks each slide part's element tree for text runs (with run-level
formatting), pictures, shapes and backgrounds, and reads the theme's
scheme colors and fonts.
"""

from .package_extractor import (
    PackageExtractor,
    extract_from_file,
    extract_presentation,
)

__all__ = ["PackageExtractor", "extract_from_file", "extract_presentation"]
