"""Exception hierarchy for overflow-preserving JSON decode/encode."""


class J2NError(Exception):
    """Base exception for overflow field decode/encode errors.

    Provides dual messaging: a short user-facing message and
    internal details for logging.
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped

    def internal(self) -> str:
        return self.internal_details


class ShapeError(J2NError):
    """Raised when a value is not a pydantic model instance or class."""


class OverflowFieldMissingError(J2NError):
    """Raised when a model declares no UnknownFields field."""


class OverflowFieldAmbiguousError(J2NError):
    """Raised when a model declares more than one UnknownFields field."""


class OverflowFieldNotExcludedError(J2NError):
    """Raised when the UnknownFields field is not excluded from dumping."""


class OverflowFieldShadowedError(J2NError):
    """Raised when declared fields read every key of a required overflow field."""


class CodecError(J2NError, ValueError):
    """Raised when input is valid JSON but not usable as a JSON object."""


class InputTooLargeError(J2NError):
    """Raised when decode input exceeds the configured size limit."""


class CollisionError(J2NError):
    """Raised when an overflow key is also emitted by a declared field."""


# Sanitized user-facing error message constants
ERR_MSG_EXPECTED_MODEL = "expected pydantic model"
ERR_MSG_FIELD_NOT_DEFINED = "field is not defined"
ERR_MSG_MULTIPLE_UNKNOWN_FIELDS = "multiple unknown fields"
ERR_MSG_FIELD_NOT_EXCLUDED = (
    "unknown fields must be ignored by the standard encoder (use Field(exclude=True))"
)
ERR_MSG_EXPECTED_OBJECT = "expected JSON object"
ERR_MSG_INVALID_CONSTANT = "invalid JSON constant"
ERR_MSG_INPUT_TOO_LARGE = "input too large"
ERR_MSG_FIELD_SHADOWED = "unknown fields key is read by a declared field"
ERR_MSG_INVALID_TEXT = "input is not valid UTF-8 text"
