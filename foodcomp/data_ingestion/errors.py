from __future__ import annotations


class IngestionError(Exception):
    """Base class for fatal ingestion failures."""


class SourceUnreadableError(IngestionError, OSError):
    """The raw table could not be read at all."""


class SourceLayoutError(IngestionError, ValueError):
    """The raw table does not match the expected column layout."""


class DuplicateFoodCodeError(IngestionError, ValueError):
    def __init__(self, codes: list[str]) -> None:
        self.codes = codes
        preview = ", ".join(codes[:10])
        more = f" (+{len(codes) - 10} more)" if len(codes) > 10 else ""
        super().__init__(f"Duplicate food_code values in build output: {preview}{more}")
