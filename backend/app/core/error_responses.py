"""
Standardized error response messages and builders.

This module provides consistent error messages and HTTPException builders
for the entire API. Using these utilities ensures:

1. Consistent message format across all endpoints
2. User-friendly error messages without leaking implementation details
3. Clear separation of user-facing messages from log messages

Error Message Format Guidelines:
- Use sentence case (capitalize first letter only)
- End with a period for complete sentences
- Use "Please try again later." for transient server errors

Usage:
    from app.core.error_responses import ErrorMessages, raise_rci_validation_error

    result = calculate_rci(...)
    if isinstance(result, RCIValidationError):
        raise_rci_validation_error(result)
"""

from typing import NoReturn, Optional

from fastapi import HTTPException, status

from app.core.reliable_change import ERROR_MESSAGES, RCIValidationError
from libs.domain_types import RCIErrorCode


class ErrorMessages:
    """Centralized error message constants and templates.

    Naming Convention:
    - Constants: SCREAMING_SNAKE_CASE for static messages
    - Methods: snake_case for templates that accept parameters
    """

    # ==========================================================================
    # RCI Input Errors (400)
    # ==========================================================================
    RCI_NOT_A_NUMBER = ERROR_MESSAGES[RCIErrorCode.NOT_A_NUMBER]
    RCI_NON_POSITIVE_SD = ERROR_MESSAGES[RCIErrorCode.NON_POSITIVE_SD]
    RCI_RELIABILITY_OUT_OF_RANGE = ERROR_MESSAGES[
        RCIErrorCode.RELIABILITY_OUT_OF_RANGE
    ]
    RCI_DEGENERATE_RELIABILITY = ERROR_MESSAGES[RCIErrorCode.DEGENERATE_RELIABILITY]
    RCI_VALUE_OUT_OF_SCALE = ERROR_MESSAGES[RCIErrorCode.VALUE_OUT_OF_SCALE]

    # ==========================================================================
    # Server Errors (500)
    # ==========================================================================
    INTERNAL_ERROR = "An unexpected error occurred. Please try again later."

    # ==========================================================================
    # Template Methods for Dynamic Messages
    # ==========================================================================
    @staticmethod
    def conflicting_mode_fields(mode: str, use_threshold_comparison: bool) -> str:
        """Message when the mode and the boolean flag disagree."""
        return (
            f"Interpretation mode '{mode}' conflicts with "
            f"use_threshold_comparison={str(use_threshold_comparison).lower()}. "
            "Please provide only one of them."
        )


# ==============================================================================
# HTTPException Builder Functions
# ==============================================================================


def raise_bad_request(detail: str, code: Optional[str] = None) -> NoReturn:
    """Raise a 400 Bad Request exception.

    Use for client errors where the request is well-formed but its values are
    rejected by domain validation.

    Args:
        detail: User-facing error message
        code: Optional machine-readable error code, sent as X-Error-Code

    Raises:
        HTTPException: 400 Bad Request
    """
    headers = {"X-Error-Code": code} if code else None
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
        headers=headers,
    )


def raise_rci_validation_error(error: RCIValidationError) -> NoReturn:
    """Raise a 400 for a rejected set of RCI inputs.

    Args:
        error: The validation error returned by the calculation engine

    Raises:
        HTTPException: 400 Bad Request carrying the error code
    """
    raise_bad_request(error.message, code=error.code.value)

