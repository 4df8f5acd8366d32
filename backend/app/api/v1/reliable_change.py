"""
Reliable Change Index endpoints.

Thin HTTP layer over app.core.reliable_change: it resolves the interpretation
mode, runs validate-then-compute, and turns a rejected input set into a 400.
The endpoints hold no state between calls.
"""
import logging
from typing import Optional

from fastapi import APIRouter

from app.core.config import settings
from app.core.error_responses import (
    ErrorMessages,
    raise_bad_request,
    raise_rci_validation_error,
)
from app.core.reliable_change import (
    RCIValidationError,
    calculate_rci,
    format_result_for_display,
)
from app.schemas.reliable_change import (
    InterpretationModeInfo,
    InterpretationModesResponse,
    RCICalculationRequest,
    RCICalculationResponse,
    RCIDisplayValues,
    RCIErrorResponse,
)
from libs.domain_types import InterpretationMode

logger = logging.getLogger(__name__)

router = APIRouter()

_MODE_DESCRIPTIONS = {
    InterpretationMode.ZSCORE: (
        "Z-score comparison",
        "The change is reliable when |RCI| exceeds 1.96.",
    ),
    InterpretationMode.THRESHOLD_COMPARE: (
        "Threshold comparison",
        "The change is reliable when the raw change |x2 - x1| exceeds "
        "1.96 × S-diff (NCSS-style reporting).",
    ),
}


def resolve_mode(
    mode: Optional[InterpretationMode],
    use_threshold_comparison: Optional[bool],
) -> InterpretationMode:
    """
    Pick the interpretation mode for a request.

    An explicit mode wins, then the boolean flag, then the server default.
    A mode and a flag that disagree are rejected with a 400.
    """
    if mode is not None and use_threshold_comparison is not None:
        if InterpretationMode.from_flag(use_threshold_comparison) is not mode:
            raise_bad_request(
                ErrorMessages.conflicting_mode_fields(
                    mode.value, use_threshold_comparison
                )
            )
    if mode is not None:
        return mode
    if use_threshold_comparison is not None:
        return InterpretationMode.from_flag(use_threshold_comparison)
    return settings.RCI_DEFAULT_MODE


@router.post(
    "/calculate",
    response_model=RCICalculationResponse,
    responses={
        400: {
            "model": RCIErrorResponse,
            "description": "Inputs rejected (not a number, SD <= 0, "
            "reliability outside [0, 1], zero S-diff, or values too large "
            "for a finite RCI)",
        },
    },
)
def calculate_rci_endpoint(request: RCICalculationRequest) -> RCICalculationResponse:
    """
    Calculate the Reliable Change Index for one pre/post comparison.

    **Formula:**
    - SEM = SD × √(1 - r)
    - S-diff = √(2 × SEM²)
    - RCI = (x2 - x1) / S-diff
    - RCI threshold = 1.96 × S-diff

    **Interpretation:**
    - `z_score`: significant when |RCI| > 1.96
    - `threshold_compare`: significant when |x2 - x1| > RCI threshold

    Both modes always give the same answer for `significant`. Lower post-test
    scores are labelled as improvement.
    """
    mode = resolve_mode(request.mode, request.use_threshold_comparison)

    result = calculate_rci(
        request.pre_score,
        request.post_score,
        request.standard_deviation,
        request.reliability,
        mode,
    )

    if isinstance(result, RCIValidationError):
        logger.info(
            f"RCI inputs rejected: {result.code.value}",
            extra={"error_code": result.code.value, "mode": mode.value},
        )
        raise_rci_validation_error(result)

    logger.debug(
        f"RCI calculated: rci={result.rci_value:.3f}, "
        f"significant={result.significant}",
        extra={"mode": mode.value},
    )

    return RCICalculationResponse(
        sem=result.sem,
        sdiff=result.sdiff,
        rci_value=result.rci_value,
        rci_threshold=result.rci_threshold,
        change_score=result.change_score,
        significant=result.significant,
        mode=result.mode,
        direction=result.direction,
        interpretation=result.interpretation,
        p_value=result.p_value,
        display=RCIDisplayValues(
            **format_result_for_display(result, settings.RCI_DISPLAY_DECIMALS)
        ),
    )


@router.get("/modes", response_model=InterpretationModesResponse)
def list_interpretation_modes() -> InterpretationModesResponse:
    """
    List the supported interpretation conventions.
    """
    return InterpretationModesResponse(
        modes=[
            InterpretationModeInfo(
                mode=mode,
                name=_MODE_DESCRIPTIONS[mode][0],
                description=_MODE_DESCRIPTIONS[mode][1],
                is_default=mode is settings.RCI_DEFAULT_MODE,
            )
            for mode in InterpretationMode
        ]
    )
