"""Errors raised while loading and transforming the model size table."""


class LLMSizesError(Exception):
    """Base class for all errors raised by this package."""


class SchemaMismatchError(LLMSizesError, ValueError):
    """Columns of a fetched sheet or cache file differ from the declared schema."""

    def __init__(self, expected: list[str], found: list[str]):
        self.expected = expected
        self.found = found
        super().__init__(f"Expected columns {expected}, found {found}")


class TransformError(LLMSizesError, ValueError):
    """A row could not be normalized into a valid record."""


class ParameterParseError(TransformError):
    """Magnitude string is not a number followed by one of M, B or T."""

    def __init__(self, values: list[str]):
        self.values = values
        super().__init__(f"Invalid parameter strings (expected e.g. '7B'): {values}")


class DateParseError(TransformError):
    """Publication timestamp is missing or in an unknown format."""


class CategoryError(TransformError):
    """Company label does not map onto the fixed company set."""

    def __init__(self, labels: list[str]):
        self.labels = labels
        super().__init__(f"Unknown company labels: {labels}")
