"""
Deployment Data Models
Pydantic v2 models for batch configuration, per-target outcomes and batch results
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LOCALHOST = "localhost"
DEFAULT_DESTINATION_ROOT = r"C:\Windows\Temp\DeployedApps"


# ==========================================
# ENUMERATIONS
# ==========================================


class Mode(str, Enum):
    """Deployment action requested for every target"""

    RUN_SCRIPT = "RunScript"
    INSTALL = "Install"
    REPAIR = "Repair"
    UNINSTALL = "Uninstall"


class Location(str, Enum):
    """Where an operation is executed"""

    LOCAL = "Local"
    REMOTE = "Remote"


class ErrorKind(str, Enum):
    """Target-scoped failure classes carried on an Outcome"""

    UNSUPPORTED_FILE_TYPE = "UnsupportedFileType"
    TARGET_UNREACHABLE = "TargetUnreachable"
    TRANSFER_FAILURE = "TransferFailure"
    TIMEOUT_EXCEEDED = "TimeoutExceeded"
    INVOCATION_FAILURE = "InvocationFailure"
    CANCELLED = "Cancelled"
    UNEXPECTED = "Unexpected"


def is_localhost(target: str) -> bool:
    """True when the target denotes the local machine (case-insensitive)"""
    return target.strip().lower() == LOCALHOST


def location_for(target: str) -> Location:
    return Location.LOCAL if is_localhost(target) else Location.REMOTE


# ==========================================
# BATCH CONFIGURATION
# ==========================================


class BatchConfig(BaseModel):
    """
    Validated configuration for a single deployment batch.
    Created once from external input and never mutated afterwards.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    app_name: str = Field(..., min_length=1)
    source_items: str
    copy_source_items: bool
    mode: Mode
    file: str = Field(..., min_length=1)
    arguments: str = ""
    destination_path: str = ""
    timeout_ms: int = Field(..., gt=0)
    target_computers: List[str] = Field(..., min_length=1)

    @field_validator("app_name")
    @classmethod
    def _normalize_app_name(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError("AppName must not be blank")
        return normalized

    @field_validator("target_computers")
    @classmethod
    def _strip_targets(cls, value: List[str]) -> List[str]:
        targets = [t.strip() for t in value if t and t.strip()]
        if not targets:
            raise ValueError("TargetComputers must contain at least one computer")
        return targets

    @model_validator(mode="before")
    @classmethod
    def _default_destination(cls, data: Any) -> Any:
        # Destination defaults to the per-application staging folder
        if isinstance(data, dict) and not data.get("destination_path"):
            app_name = str(data.get("app_name", "")).strip()
            data = {
                **data,
                "destination_path": f"{DEFAULT_DESTINATION_ROOT}\\{app_name}",
            }
        return data

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


# ==========================================
# COLLABORATOR RESULTS
# ==========================================


class ProcessResult(BaseModel):
    """Native result of launching an installer or script"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    exit_code: int
    stdout: Optional[str] = None
    stderr: Optional[str] = None


class IOResult(BaseModel):
    """Result of a file transfer or directory removal"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    ok: bool
    error: Optional[str] = None


# ==========================================
# OUTCOMES
# ==========================================


class Outcome(BaseModel):
    """
    Terminal result record for one target.

    exit_code is 0 on success, -1 for orchestration-level failures
    (unreachable, staging failure, timeout, cancellation, exceptions) and
    otherwise the native exit code reported by the invoked operation.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: str
    exit_code: int
    error_message: Optional[str] = None
    output: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @classmethod
    def failure(cls, target: str, kind: ErrorKind, message: str) -> "Outcome":
        return cls(target=target, exit_code=-1, error_message=message, error_kind=kind)

    @classmethod
    def from_process_result(cls, target: str, result: ProcessResult) -> "Outcome":
        return cls(
            target=target,
            exit_code=result.exit_code,
            output=result.stdout or None,
            error_message=result.stderr or None,
            error_kind=None if result.exit_code == 0 else ErrorKind.INVOCATION_FAILURE,
        )


class BatchResult(BaseModel):
    """All outcomes of one run (submission order) plus total elapsed time"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    outcomes: List[Outcome]
    elapsed_seconds: float = Field(..., ge=0.0)

    @property
    def success_count(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.outcomes) - self.success_count

    def outcome_for(self, target: str) -> Optional[Outcome]:
        for outcome in self.outcomes:
            if outcome.target == target:
                return outcome
        return None
