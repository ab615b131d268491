"""Domain-specific errors for sensorsctl."""


class SensorsctlError(Exception):
    """Base error for sensorsctl."""


class ChipPatternError(SensorsctlError):
    """Raised when a chip name pattern cannot be parsed."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Parse error in chip name `{text}'")
        self.text = text


class TooManyChipsError(SensorsctlError):
    """Raised when more chip patterns are given than can be handled."""


class ConfigLoadError(SensorsctlError):
    """Raised when the configuration source cannot be opened or read."""


class ConfigValidationError(SensorsctlError):
    """Raised when a configuration document does not conform to schema or semantics."""


class BackendError(SensorsctlError):
    """Base backend error."""


class BackendInitError(BackendError):
    """Raised when the backend cannot be initialized."""


class SetError(BackendError):
    """Base error for applying `set` statements to a chip."""


class SetAccessDeniedError(SetError):
    """Raised when chip attributes cannot be opened for writing at all."""


class PartialSetError(SetError):
    """Raised when at least one `set` statement failed to apply."""
