"""
AutoDeployer - Data Models
"""

from .deployment import (
    DEFAULT_DESTINATION_ROOT,
    LOCALHOST,
    BatchConfig,
    BatchResult,
    ErrorKind,
    IOResult,
    Location,
    Mode,
    Outcome,
    ProcessResult,
    is_localhost,
    location_for,
)

__all__ = [
    "DEFAULT_DESTINATION_ROOT",
    "LOCALHOST",
    "BatchConfig",
    "BatchResult",
    "ErrorKind",
    "IOResult",
    "Location",
    "Mode",
    "Outcome",
    "ProcessResult",
    "is_localhost",
    "location_for",
]
