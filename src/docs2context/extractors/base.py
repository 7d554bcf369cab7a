"""Abstract base class for binary-format text extractors."""

from abc import ABC, abstractmethod


class BaseExtractor(ABC):
    """
    Abstract base class for all text extractors.

    Subclasses must implement:
    - supported_extensions: list of file extensions this extractor handles
    - extractor_name: unique identifier for this extractor
    - extract(): convert raw bytes to plain text
    """

    # Class-level attributes for routing
    supported_extensions: list[str] = []
    extractor_name: str = "base"

    @abstractmethod
    def extract(self, data: bytes, extension: str) -> str:
        """
        Convert raw file bytes to plain text.

        Args:
            data: File content
            extension: Lower-cased file extension including the dot

        Returns:
            Extracted plain text

        Raises:
            Exception: Any failure; callers report it as an extraction error
        """
        pass

    def can_handle(self, extension: str) -> bool:
        """Check if file extension is supported."""
        return extension.lower() in self.supported_extensions
