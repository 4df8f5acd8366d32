"""
Pydantic schemas for request/response validation.
"""
from .reliable_change import (
    InterpretationModeInfo,
    InterpretationModesResponse,
    RCICalculationRequest,
    RCICalculationResponse,
    RCIDisplayValues,
    RCIErrorResponse,
)

__all__ = [
    "InterpretationModeInfo",
    "InterpretationModesResponse",
    "RCICalculationRequest",
    "RCICalculationResponse",
    "RCIDisplayValues",
    "RCIErrorResponse",
]
