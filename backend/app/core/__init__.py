"""
Core module for application configuration and utilities.

The calculation engine is not imported at package level; import it directly:
from app.core.reliable_change import calculate_rci
"""
from .config import settings

__all__ = ["settings"]
