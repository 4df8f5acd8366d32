"""
Reliable Change Index (RCI) Calculation Module.

This module decides whether the difference between an individual's pre-test
and post-test score is larger than measurement error alone would produce.

Methodology
===========
The classical RCI (Jacobson & Truax, 1991, without correction terms):

    SEM    = SD × √(1 - r)
    S-diff = √(2 × SEM²)
    RCI    = (x2 - x1) / S-diff

Where:
    x1, x2 = pre-test and post-test scores
    SD     = standard deviation of the measure (normative or baseline sample)
    r      = reliability coefficient of the measure (test-retest or alpha)

Interpretation Conventions
==========================
Two reporting conventions are supported. They are the same inequality
rearranged, so they always agree on significance:

- **z_score**: the change is reliable when |RCI| > 1.96
- **threshold_compare** (NCSS style): the change is reliable when
  |x2 - x1| > 1.96 × S-diff

Lower post-test scores are treated as improvement when labelling direction.
The label is for display only; ``significant`` is the authoritative outcome.

Usage:
    result = calculate_rci(25, 10, 8.5, 0.88)
    if isinstance(result, RCIValidationError):
        show(result.message)
    else:
        show(result.rci_value, result.significant)
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from scipy.stats import norm

from libs.domain_types import ChangeDirection, InterpretationMode, RCIErrorCode

# Two-tailed critical z for p < .05
RCI_CRITICAL_Z = 1.96

# Relative tolerance under which the threshold comparison is treated as a tie
# and settled by the z comparison, so both modes always agree
_BOUNDARY_REL_TOLERANCE = 1e-9

DEFAULT_DISPLAY_DECIMALS = 2

ERROR_MESSAGES: Dict[RCIErrorCode, str] = {
    RCIErrorCode.NOT_A_NUMBER: "All fields must be filled with valid numbers.",
    RCIErrorCode.NON_POSITIVE_SD: "Standard Deviation must be greater than 0.",
    RCIErrorCode.RELIABILITY_OUT_OF_RANGE: (
        "Reliability coefficient must be between 0 and 1."
    ),
    RCIErrorCode.DEGENERATE_RELIABILITY: (
        "The standard error of the difference is zero (reliability of 1 or a "
        "vanishing SD); the RCI is undefined."
    ),
    RCIErrorCode.VALUE_OUT_OF_SCALE: (
        "Values are too large to compute a finite RCI."
    ),
}

INTERPRETATION_MESSAGES: Dict[ChangeDirection, str] = {
    ChangeDirection.IMPROVEMENT: "The improvement is statistically reliable.",
    ChangeDirection.DECLINE: "The decline is statistically reliable.",
    ChangeDirection.NO_RELIABLE_CHANGE: "The change is not statistically reliable.",
}

RawValue = Union[int, float, str, None]


@dataclass(frozen=True)
class RawInputs:
    """Caller-supplied values, as typed numbers or unparsed form text."""

    pre_score: RawValue
    post_score: RawValue
    standard_deviation: RawValue
    reliability: RawValue


@dataclass(frozen=True)
class ValidatedInputs:
    """Inputs that passed every validation rule."""

    pre_score: float
    post_score: float
    standard_deviation: float
    reliability: float


@dataclass(frozen=True)
class RCIValidationError:
    """Why a set of inputs was rejected. Returned, never raised."""

    code: RCIErrorCode
    message: str

    @classmethod
    def from_code(cls, code: RCIErrorCode) -> "RCIValidationError":
        return cls(code=code, message=ERROR_MESSAGES[code])


@dataclass(frozen=True)
class RCIResult:
    """Derived statistics for one pre/post comparison."""

    sem: float
    sdiff: float
    rci_value: float
    rci_threshold: float
    change_score: float
    significant: bool
    mode: InterpretationMode
    direction: ChangeDirection
    p_value: float

    @property
    def interpretation(self) -> str:
        return interpretation_message(self.direction)


def _parse_number(value: Any) -> Optional[float]:
    """Parse a single field to a finite float, or None if it is not one."""
    # bool is an int subclass but never a score
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None

    if not math.isfinite(number):
        return None
    return number


def _standard_errors(sd: float, reliability: float) -> Tuple[float, float]:
    """Return (SEM, S-diff) in the fixed pipeline order."""
    sem = sd * math.sqrt(1 - reliability)
    sdiff = math.sqrt(2 * (sem * sem))
    return sem, sdiff


def validate(
    raw_inputs: RawInputs,
) -> Union[ValidatedInputs, RCIValidationError]:
    """
    Validate raw RCI inputs.

    Checks run in a fixed order and stop at the first failure, so exactly one
    error is ever reported:

    1. All four fields parse to finite numbers (NOT_A_NUMBER, reported for the
       form as a whole rather than per field)
    2. Standard deviation > 0 (NON_POSITIVE_SD)
    3. 0 <= reliability <= 1 (RELIABILITY_OUT_OF_RANGE)
    4. S-diff is non-zero (DEGENERATE_RELIABILITY). This catches r = 1 and
       SDs small enough for SEM² to underflow.
    5. S-diff and the RCI are finite (VALUE_OUT_OF_SCALE). Finite inputs near
       the float limit can still overflow either one.

    Args:
        raw_inputs: Numbers or unparsed text for the four fields.

    Returns:
        ValidatedInputs on success, otherwise an RCIValidationError.
    """
    parsed = [
        _parse_number(raw_inputs.pre_score),
        _parse_number(raw_inputs.post_score),
        _parse_number(raw_inputs.standard_deviation),
        _parse_number(raw_inputs.reliability),
    ]
    if any(value is None for value in parsed):
        return RCIValidationError.from_code(RCIErrorCode.NOT_A_NUMBER)

    pre_score, post_score, sd, reliability = parsed

    if sd <= 0:
        return RCIValidationError.from_code(RCIErrorCode.NON_POSITIVE_SD)

    if reliability < 0 or reliability > 1:
        return RCIValidationError.from_code(RCIErrorCode.RELIABILITY_OUT_OF_RANGE)

    _, sdiff = _standard_errors(sd, reliability)
    if sdiff == 0:
        return RCIValidationError.from_code(RCIErrorCode.DEGENERATE_RELIABILITY)

    if not (
        math.isfinite(sdiff) and math.isfinite((post_score - pre_score) / sdiff)
    ):
        return RCIValidationError.from_code(RCIErrorCode.VALUE_OUT_OF_SCALE)

    return ValidatedInputs(
        pre_score=pre_score,
        post_score=post_score,
        standard_deviation=sd,
        reliability=reliability,
    )


def classify_direction(rci_value: float) -> ChangeDirection:
    """Label the direction of change, treating lower post scores as improvement."""
    if rci_value < -RCI_CRITICAL_Z:
        return ChangeDirection.IMPROVEMENT
    if rci_value > RCI_CRITICAL_Z:
        return ChangeDirection.DECLINE
    return ChangeDirection.NO_RELIABLE_CHANGE


def interpretation_message(direction: ChangeDirection) -> str:
    """Human-readable sentence for a direction label."""
    return INTERPRETATION_MESSAGES[direction]


def is_significant(
    rci_value: float,
    change_score: float,
    rci_threshold: float,
    mode: InterpretationMode,
) -> bool:
    """
    Apply the interpretation policy for the selected mode.

    The two modes are algebraically identical. Floating point can still make
    ``change_score`` and ``rci_threshold`` land an ulp apart at the exact
    boundary, so a threshold tie is settled by the z comparison.
    """
    exceeds_z = abs(rci_value) > RCI_CRITICAL_Z

    if mode is InterpretationMode.ZSCORE:
        return exceeds_z

    if mode is InterpretationMode.THRESHOLD_COMPARE:
        if math.isclose(
            change_score, rci_threshold, rel_tol=_BOUNDARY_REL_TOLERANCE
        ):
            return exceeds_z
        return change_score > rci_threshold

    raise ValueError(f"Unsupported interpretation mode: {mode!r}")


def compute(
    inputs: ValidatedInputs,
    mode: InterpretationMode = InterpretationMode.ZSCORE,
) -> RCIResult:
    """
    Compute the RCI statistics for validated inputs.

    Pure and deterministic: identical inputs always give bit-identical results.

    Formula pipeline (in this order):
        1. SEM           = SD × √(1 - r)
        2. S-diff        = √(2 × SEM²)
        3. RCI           = (x2 - x1) / S-diff
        4. RCI threshold = 1.96 × S-diff
        5. Change score  = |x2 - x1|

    Args:
        inputs: Output of validate().
        mode: Interpretation convention used for ``significant``.

    Returns:
        RCIResult with all derived statistics.

    Raises:
        ValueError: If S-diff is zero. validate() rejects such inputs, so this
            only happens when compute() is called on unvalidated data.

    Examples:
        >>> inputs = ValidatedInputs(25.0, 18.0, 8.5, 0.88)
        >>> round(compute(inputs).rci_value, 3)
        -1.681
    """
    sem, sdiff = _standard_errors(inputs.standard_deviation, inputs.reliability)
    if sdiff == 0:
        raise ValueError(
            "standard error of the difference is zero; "
            f"reliability={inputs.reliability} must be validated first"
        )

    difference = inputs.post_score - inputs.pre_score
    rci_value = difference / sdiff
    rci_threshold = RCI_CRITICAL_Z * sdiff
    change_score = abs(difference)

    return RCIResult(
        sem=sem,
        sdiff=sdiff,
        rci_value=rci_value,
        rci_threshold=rci_threshold,
        change_score=change_score,
        significant=is_significant(rci_value, change_score, rci_threshold, mode),
        mode=mode,
        direction=classify_direction(rci_value),
        # Two-tailed p under the standard normal; informational only
        p_value=float(2 * norm.sf(abs(rci_value))),
    )


def calculate_rci(
    pre_score: RawValue,
    post_score: RawValue,
    standard_deviation: RawValue,
    reliability: RawValue,
    mode: InterpretationMode = InterpretationMode.ZSCORE,
) -> Union[RCIResult, RCIValidationError]:
    """
    Validate and compute in one call.

    Bad input never raises; it comes back as an RCIValidationError.

    Examples:
        >>> calculate_rci(25, 10, 8.5, 0.88).significant
        True
        >>> calculate_rci(25, 10, 0, 0.88).code
        <RCIErrorCode.NON_POSITIVE_SD: 'non_positive_sd'>
    """
    validated = validate(
        RawInputs(
            pre_score=pre_score,
            post_score=post_score,
            standard_deviation=standard_deviation,
            reliability=reliability,
        )
    )
    if isinstance(validated, RCIValidationError):
        return validated
    return compute(validated, mode)


def format_result_for_display(
    result: RCIResult, decimals: int = DEFAULT_DISPLAY_DECIMALS
) -> Dict[str, str]:
    """
    Render the numeric result fields as fixed-precision strings.

    Args:
        result: Output of compute().
        decimals: Number of decimal places (2 matches the calculator display).

    Returns:
        Mapping of field name to formatted value.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    return {
        "sem": f"{result.sem:.{decimals}f}",
        "sdiff": f"{result.sdiff:.{decimals}f}",
        "rci_value": f"{result.rci_value:.{decimals}f}",
        "rci_threshold": f"{result.rci_threshold:.{decimals}f}",
        "change_score": f"{result.change_score:.{decimals}f}",
    }
