"""Exceptions raised while ingesting documents."""


class Docs2ContextError(Exception):
    """Base error for the retrieval engine."""

    pass


class IngestionError(Docs2ContextError):
    """A single file could not be indexed."""

    def __init__(self, path, message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")


class UnsupportedFileError(IngestionError):
    """File extension is not indexable (skipped, not failed)."""

    pass


class FileTooLargeError(IngestionError):
    """File exceeds the configured size limit (skipped, not failed)."""

    pass


class ExtractionError(IngestionError):
    """File could not be read or converted to plain text."""

    pass
