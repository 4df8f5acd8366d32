"""
Pydantic schemas for the Reliable Change Index endpoints.

The four score fields accept numbers or raw form text. Parsing and range
checks are left to the calculation engine so that every input problem is
reported with the same error codes and messages, whatever the client sends.
"""
from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr
from typing import List, Optional, Union

from libs.domain_types import ChangeDirection, InterpretationMode, RCIErrorCode

# Strict types keep true/false from being read as 1/0
RawField = Optional[Union[StrictInt, StrictFloat, StrictStr]]


class RCICalculationRequest(BaseModel):
    """Inputs for a single pre/post comparison."""

    pre_score: RawField = Field(
        ...,
        description="Pre-test score (x1). Number or numeric string.",
        examples=[25],
    )
    post_score: RawField = Field(
        ...,
        description="Post-test score (x2). Number or numeric string.",
        examples=[18],
    )
    standard_deviation: RawField = Field(
        ...,
        description="Standard deviation of the measure. Must be greater than 0.",
        examples=[8.5],
    )
    reliability: RawField = Field(
        ...,
        description="Reliability coefficient of the measure, between 0 and 1.",
        examples=[0.88],
    )
    mode: Optional[InterpretationMode] = Field(
        None,
        description="Interpretation convention. Defaults to the server setting.",
    )
    use_threshold_comparison: Optional[bool] = Field(
        None,
        description=(
            "Boolean form of the mode: true selects threshold_compare, "
            "false selects z_score."
        ),
    )


class RCIDisplayValues(BaseModel):
    """Result values formatted to the configured display precision."""

    sem: str
    sdiff: str
    rci_value: str
    rci_threshold: str
    change_score: str


class RCICalculationResponse(BaseModel):
    """
    Derived statistics for a pre/post comparison.

    ``significant`` is decided by ``mode``; both modes always agree.
    ``direction`` assumes lower post-test scores represent improvement.
    """

    sem: float = Field(..., ge=0.0, description="Standard error of measurement")
    sdiff: float = Field(..., gt=0.0, description="Standard error of the difference")
    rci_value: float = Field(..., description="Reliable Change Index (x2 - x1) / S-diff")
    rci_threshold: float = Field(
        ..., gt=0.0, description="Smallest raw change that is reliable (1.96 × S-diff)"
    )
    change_score: float = Field(..., ge=0.0, description="Absolute raw change |x2 - x1|")
    significant: bool = Field(..., description="Whether the change is reliable")
    mode: InterpretationMode
    direction: ChangeDirection
    interpretation: str = Field(..., description="Human-readable interpretation")
    p_value: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Two-tailed p-value of the RCI under the standard normal",
    )
    display: RCIDisplayValues


class RCIErrorResponse(BaseModel):
    """Body returned when the inputs are rejected."""

    detail: str
    code: RCIErrorCode


class InterpretationModeInfo(BaseModel):
    """Description of one interpretation convention."""

    mode: InterpretationMode
    name: str
    description: str
    is_default: bool


class InterpretationModesResponse(BaseModel):
    """Supported interpretation conventions."""

    modes: List[InterpretationModeInfo]
