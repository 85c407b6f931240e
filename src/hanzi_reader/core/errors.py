"""Error taxonomy shared across services and persistence."""


class HanziReaderError(Exception):
    """Base class for all errors raised by hanzi_reader."""


class DictionaryLoadError(HanziReaderError):
    """Dictionary source is missing, unreadable, or contains no entries."""


class DictionaryNotLoadedError(HanziReaderError):
    """A lookup was attempted before a successful dictionary load."""


class OCRError(HanziReaderError):
    """Text extraction failed for a single image.

    Attributes:
        recoverable: False when retrying the same image cannot succeed
            (e.g. the file does not exist).
    """

    def __init__(self, message: str, recoverable: bool = True) -> None:
        super().__init__(message)
        self.recoverable = recoverable


class SegmentationError(HanziReaderError):
    """Internal invariant violation in the segmentation engine."""


class StorageError(HanziReaderError):
    """Persistence operation failed."""


class BookNotFoundError(StorageError):
    """No book exists with the requested id."""


class InvalidPageOrderError(HanziReaderError, ValueError):
    """A page ordering omits, duplicates, or invents page identifiers."""


class JobStateError(HanziReaderError):
    """Operation not allowed in the pipeline job's current state."""
