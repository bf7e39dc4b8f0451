"""Error types raised while acquiring CSV text."""


class IngestError(Exception):
    """Base class for errors that abort an ingestion call."""


class FormatError(IngestError):
    """Raised when an encoded source does not match a recognized encoding."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid encoded source: {reason}")


class FetchError(IngestError):
    """Raised when fetching an external reference does not succeed."""

    def __init__(self, status: int, status_text: str) -> None:
        self.status = status
        self.status_text = status_text
        super().__init__(f"Failed to fetch data: {status} {status_text}")
