"""
Root of the keyboard store error hierarchy.

Every failure the codec, the gateway or the startup sequence reports is a
KeyboardStoreError carrying a message, the underlying boto3/pydantic error
when there is one, and a flat context dict that ends up in log lines and in
HTTP error bodies.
"""

from typing import Any, Dict, Optional


class KeyboardStoreError(Exception):
    """Base exception for the keyboard store.

    Attributes:
        message: What went wrong, without the context
        original_error: The boto3, botocore or pydantic error underneath, if any
        context: Table name, operation, error code and similar details
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.original_error = original_error
        self.context = dict(context) if context else {}
        super().__init__(message)

    def _context_strings(self) -> Dict[str, str]:
        return {key: str(value) for key, value in self.context.items()}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self._context_strings().items())
        return f"{self.message} (Context: {details})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, original_error={self.original_error!r}, context={self.context!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Structured form used for HTTP error bodies."""
        return {
            'error': type(self).__name__,
            'message': self.message,
            'context': self._context_strings(),
        }
