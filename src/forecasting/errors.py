"""
Errors raised by the forecasting engine.
"""


class InsufficientDataError(ValueError):
    """Raised when an operation needs a non-empty series and received none."""

    def __init__(self, operation: str, message: str = ""):
        self.operation = operation
        super().__init__(message or f"{operation} requires at least one historical period")
