"""Error kinds raised or reported while converting a recording."""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ConversionError(Exception):
    """Base exception for all conversion errors."""
    pass


class ConfigIOError(ConversionError):
    """Raised when calibration or schema text is missing, empty or unreadable."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"'{path}' failed to open or is empty.")


class ConfigParseError(ConversionError):
    """Raised when calibration or schema text is not valid JSON."""

    def __init__(self, source: str, offset: int, message: str):
        self.source = source
        self.offset = offset
        self.message = message
        super().__init__(f"{source}: Error(offset {offset}): {message}")


class SchemaViolationError(ConversionError):
    """Raised when the calibration document does not conform to its schema."""

    def __init__(self, schema_pointer: str, keyword: str, document_pointer: str, message: str = ""):
        self.schema_pointer = schema_pointer
        self.keyword = keyword
        self.document_pointer = document_pointer
        text = (
            f"Invalid schema: {schema_pointer}\n"
            f"Invalid keyword: {keyword}\n"
            f"Invalid document: {document_pointer}"
        )
        if message:
            text += f"\n{message}"
        super().__init__(text)


class GeometryError(ConversionError):
    """Raised when a sensor origin or axis pair cannot form a pose."""
    pass


class BoundingBoxError(ConversionError):
    """Raised when ego bounding box bounds are non-finite or unordered."""
    pass


class DatasetError(ConversionError):
    """Base exception for point cloud dataset validation failures."""

    def __init__(self, message: str, field: Optional[str] = None, index: Optional[int] = None):
        self.field = field
        self.index = index
        super().__init__(message)


class DatasetStructureError(DatasetError):
    """Wrong field count, missing field, or shape/dimension mismatch."""
    pass


class DatasetSignError(DatasetError):
    """A sign-constrained field contains a negative value."""
    pass


class DatasetTimestampRangeError(DatasetError):
    """A timestamp cannot be represented as an output time."""

    def __init__(self, message: str, field: str, index: int, value: int):
        self.value = value
        super().__init__(message, field=field, index=index)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of a validation or construction step: a value or an error.

    Example:
        outcome = validate_dataset(arrays)
        if not outcome.ok:
            logger.error(outcome.error)
        table = outcome.unwrap()
    """
    value: Optional[T] = None
    error: Optional[ConversionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ConversionError) -> "Outcome[T]":
        return cls(error=error)
