"""Pluggable text extractors keyed by file extension."""

from typing import Optional

import structlog

from .base import BaseExtractor
from .markitdown_extractor import MarkItDownExtractor

logger = structlog.get_logger(__name__)


class ExtractorRegistry:
    """Maps file extensions to the extractor that converts them to text."""

    def __init__(self, extractors: Optional[list[BaseExtractor]] = None):
        self._extractors: dict[str, BaseExtractor] = {}
        for extractor in extractors or []:
            self.register(extractor)

    def register(self, extractor: BaseExtractor) -> None:
        """Register an extractor for every extension it supports."""
        for extension in extractor.supported_extensions:
            self._extractors[extension.lower()] = extractor
            logger.debug(
                "Registered extractor",
                extension=extension,
                extractor=extractor.extractor_name,
            )

    def get(self, extension: str) -> Optional[BaseExtractor]:
        """Get the extractor for an extension, if any."""
        return self._extractors.get(extension.lower())

    def has(self, extension: str) -> bool:
        """Check whether an extractor is registered for an extension."""
        return extension.lower() in self._extractors

    @property
    def extensions(self) -> list[str]:
        """All extensions with a registered extractor."""
        return sorted(self._extractors)


def default_registry() -> ExtractorRegistry:
    """Registry with MarkItDown handling PDF and DOCX."""
    return ExtractorRegistry([MarkItDownExtractor()])


__all__ = [
    "BaseExtractor",
    "ExtractorRegistry",
    "MarkItDownExtractor",
    "default_registry",
]
