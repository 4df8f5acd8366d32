"""Shared domain types for the RCI calculator.

This package is the single source of truth for domain enums used by the
calculation engine and (via OpenAPI) any client of the HTTP API.

Usage:
    from libs.domain_types import InterpretationMode, ChangeDirection
"""

import enum


class InterpretationMode(str, enum.Enum):
    """Convention used to decide whether a change is significant.

    Both conventions reduce to the same inequality, so they always agree:
    - z_score: |RCI| > 1.96
    - threshold_compare: |x2 - x1| > 1.96 * S-diff (NCSS style)
    """

    ZSCORE = "z_score"
    THRESHOLD_COMPARE = "threshold_compare"

    @classmethod
    def from_flag(cls, use_threshold_comparison: bool) -> "InterpretationMode":
        """Map the boolean form toggle onto a mode."""
        return cls.THRESHOLD_COMPARE if use_threshold_comparison else cls.ZSCORE


class ChangeDirection(str, enum.Enum):
    """Direction of a reliable change.

    Lower post-test scores are treated as improvement.
    """

    IMPROVEMENT = "improvement"
    DECLINE = "decline"
    NO_RELIABLE_CHANGE = "no_reliable_change"


class RCIErrorCode(str, enum.Enum):
    """Reasons a set of RCI inputs can be rejected."""

    NOT_A_NUMBER = "not_a_number"
    NON_POSITIVE_SD = "non_positive_sd"
    RELIABILITY_OUT_OF_RANGE = "reliability_out_of_range"
    DEGENERATE_RELIABILITY = "degenerate_reliability"
    VALUE_OUT_OF_SCALE = "value_out_of_scale"


__all__ = [
    "InterpretationMode",
    "ChangeDirection",
    "RCIErrorCode",
]
