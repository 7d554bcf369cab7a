"""Extractor using Microsoft's MarkItDown library."""

import io

import structlog
from markitdown import MarkItDown

from .base import BaseExtractor

logger = structlog.get_logger(__name__)


class MarkItDownExtractor(BaseExtractor):
    """
    Extractor using Microsoft's MarkItDown library.
    Handles: PDF, DOCX.
    """

    supported_extensions = [".pdf", ".docx"]
    extractor_name = "markitdown"

    def __init__(self):
        self._converter = None

    @property
    def converter(self) -> MarkItDown:
        """MarkItDown converter, created on first use."""
        if self._converter is None:
            self._converter = MarkItDown()
        return self._converter

    def extract(self, data: bytes, extension: str) -> str:
        """
        Convert document bytes to Markdown text.

        Args:
            data: Document bytes
            extension: File extension (".pdf" or ".docx")

        Returns:
            Extracted text content
        """
        result = self.converter.convert_stream(io.BytesIO(data), file_extension=extension)
        content = result.text_content or ""

        logger.debug("MarkItDown extracted", extension=extension, chars=len(content))
        return content
