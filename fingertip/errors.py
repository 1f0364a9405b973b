"""
Custom exceptions for the fingertip pipeline.

Per-hand failures are raised by the detection stages and turned into an
``AnalysisStatus`` by the pipeline; they never escape a frame.
"""

from typing import Optional, Any


class FingertipError(Exception):
    """Base exception for all fingertip pipeline errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        """
        Initialize fingertip exception.

        Args:
            message: Error message
            details: Optional additional details
        """
        super().__init__(message)
        self.message = message
        self.details = details


class HandContourNotFoundError(FingertipError):
    """Raised when the hand mask contains no foreground region."""

    def __init__(self, reason: str = "mask is empty"):
        message = f"No hand contour found: {reason}"
        super().__init__(message, details={'reason': reason})


class InsufficientGeometryError(FingertipError):
    """Raised when a contour is too small for hull or area computation."""

    def __init__(self, num_points: int, reason: str = "fewer than 3 points"):
        message = f"Insufficient contour geometry ({num_points} points): {reason}"
        super().__init__(message, details={'num_points': num_points, 'reason': reason})


class ConfigurationError(FingertipError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        message = f"Invalid configuration '{key}' = {value!r}: {reason}"
        super().__init__(message, details={'key': key, 'value': value, 'reason': reason})
