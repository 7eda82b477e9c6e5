"""Custom exceptions for the fractal engine."""

from typing import Iterable, Optional


class FractalEngineError(Exception):
    """Base exception for all fractal engine errors."""

    def __init__(self, message: str, error_code: Optional[str] = None) -> None:
        """Initialize the exception with message and optional error code."""
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__


class UnknownAlgorithmError(FractalEngineError):
    """Raised when an algorithm id is not present in the registry."""

    def __init__(self, algorithm_id: str, available: Iterable[str] = ()) -> None:
        self.algorithm_id = algorithm_id
        self.available = list(available)
        message = f"Unknown algorithm '{algorithm_id}'"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class InvalidConfigurationError(FractalEngineError):
    """Raised when a configuration is rejected for an algorithm."""

    def __init__(self, message: str, algorithm_id: Optional[str] = None) -> None:
        self.algorithm_id = algorithm_id
        super().__init__(message)
