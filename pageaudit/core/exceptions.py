"""Page audit exceptions."""


class AuditError(Exception):
    """Base exception for all page audit errors."""


class InvalidScoreError(AuditError):
    """Raised when an audit produces a score that is not finite or exceeds 1."""

    def __init__(self, audit_name: str, score: object, reason: str | None = None):
        self.audit_name = audit_name
        self.score = score
        message = reason or f"Invalid score: {score}"
        super().__init__(f"{message} (audit: {audit_name})")


class MissingRawValueError(AuditError):
    """Raised when a result is built from an outcome without a raw value."""

    def __init__(self, audit_name: str):
        self.audit_name = audit_name
        super().__init__(f"Audit result for {audit_name} requires a raw_value")


class MissingImpactEstimateError(AuditError):
    """Raised when a performance hint has no numeric summary.wastedMs."""

    def __init__(self, audit_name: str):
        self.audit_name = audit_name
        super().__init__(
            f"Performance hint {audit_name} is missing a numeric summary.wastedMs"
        )


class ConfigurationError(AuditError):
    """Raised when a report configuration does not match the produced results."""

    def __init__(
        self,
        message: str,
        category_id: str | None = None,
        audit_name: str | None = None,
    ):
        self.message = message
        self.category_id = category_id
        self.audit_name = audit_name
        super().__init__(message)


class LoaderError(AuditError):
    """Base exception for loader errors, prefixed with the file location."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        file_path: str | None = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.file_path = file_path

        location_parts = []
        if file_path:
            location_parts.append(f"File: {file_path}")
        if line is not None:
            location_parts.append(f"Line: {line}")
        if column is not None:
            location_parts.append(f"Column: {column}")

        if location_parts:
            full_message = f"{', '.join(location_parts)}: {message}"
        else:
            full_message = message

        super().__init__(full_message)


class ValidationError(LoaderError):
    """Loaded data does not match the expected model."""


class ParseError(LoaderError):
    """YAML parsing error, located at the offending mark."""
