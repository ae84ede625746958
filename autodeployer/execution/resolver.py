"""
Action Resolver Module
Single Responsibility: Map (location, mode, file reference) to one concrete operation

Pure decision logic - no I/O, no hidden state. Every combination is looked up
in one table; anything not in the table is an UnsupportedFileType.
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import PureWindowsPath
from typing import Dict, Optional, Tuple

from autodeployer.errors import UnsupportedFileType
from autodeployer.models.deployment import Location, Mode


class OperationKind(str, Enum):
    """The fixed set of operations the invocation layer knows how to launch"""

    POWERSHELL_SCRIPT = "run PowerShell script"
    BATCH_SCRIPT = "run batch script"
    MSI_INSTALL = "install MSI package"
    MSP_INSTALL = "install MSP patch"
    EXE_INSTALL = "install executable"
    MSI_REPAIR = "repair MSI package"
    MSP_REPAIR = "repair MSP patch"
    EXE_REPAIR = "repair executable"
    MSI_UNINSTALL = "uninstall MSI package"
    MSP_UNINSTALL = "uninstall MSP patch"
    EXE_UNINSTALL = "uninstall executable"
    PRODUCT_CODE_UNINSTALL = "uninstall by product code"


@dataclass(frozen=True)
class Operation:
    """One concrete action selected for a target"""

    kind: OperationKind
    location: Location
    product_code: Optional[str] = None

    @property
    def is_local(self) -> bool:
        return self.location == Location.LOCAL

    @property
    def description(self) -> str:
        return f"{self.kind.value} ({self.location.value.lower()})"


# (mode, extension) -> operation kind
OPERATION_TABLE: Dict[Tuple[Mode, str], OperationKind] = {
    (Mode.RUN_SCRIPT, ".ps1"): OperationKind.POWERSHELL_SCRIPT,
    (Mode.RUN_SCRIPT, ".bat"): OperationKind.BATCH_SCRIPT,
    (Mode.RUN_SCRIPT, ".cmd"): OperationKind.BATCH_SCRIPT,
    (Mode.INSTALL, ".msi"): OperationKind.MSI_INSTALL,
    (Mode.INSTALL, ".msp"): OperationKind.MSP_INSTALL,
    (Mode.INSTALL, ".exe"): OperationKind.EXE_INSTALL,
    (Mode.REPAIR, ".msi"): OperationKind.MSI_REPAIR,
    (Mode.REPAIR, ".msp"): OperationKind.MSP_REPAIR,
    (Mode.REPAIR, ".exe"): OperationKind.EXE_REPAIR,
    (Mode.UNINSTALL, ".msi"): OperationKind.MSI_UNINSTALL,
    (Mode.UNINSTALL, ".msp"): OperationKind.MSP_UNINSTALL,
    (Mode.UNINSTALL, ".exe"): OperationKind.EXE_UNINSTALL,
}

# Operations that accept the configured invocation arguments
ARGUMENT_OPERATIONS = frozenset(
    kind
    for kind in OperationKind
    if kind not in (OperationKind.POWERSHELL_SCRIPT, OperationKind.BATCH_SCRIPT)
)

_MODE_LABELS = {
    Mode.RUN_SCRIPT: "Script",
    Mode.INSTALL: "Install",
    Mode.REPAIR: "Repair",
    Mode.UNINSTALL: "Uninstall",
}


def file_extension(file_ref: str) -> str:
    """Lower-cased extension of a Windows or POSIX path ('' when absent)"""
    return PureWindowsPath(file_ref.strip()).suffix.lower()


def parse_product_code(value: str) -> Optional[str]:
    """
    Parses a GUID-shaped product identifier.

    Accepts hyphenated, braced and bare 32-hex-digit forms.

    Returns:
        The canonical msiexec form ({XXXXXXXX-XXXX-...}, upper case) or None
    """
    try:
        guid = uuid.UUID(value.strip())
    except (ValueError, AttributeError):
        return None
    return "{" + str(guid).upper() + "}"


def resolve(location: Location, mode: Mode, file_ref: str) -> Operation:
    """
    Selects the operation to invoke for a target.

    Args:
        location: Local or Remote execution
        mode: Requested deployment mode
        file_ref: File path (extension inspected) or product identifier

    Returns:
        The resolved Operation

    Raises:
        UnsupportedFileType: If no operation exists for the combination
    """
    if mode == Mode.UNINSTALL:
        product_code = parse_product_code(file_ref)
        if product_code is not None:
            return Operation(
                kind=OperationKind.PRODUCT_CODE_UNINSTALL,
                location=location,
                product_code=product_code,
            )

    extension = file_extension(file_ref)
    kind = OPERATION_TABLE.get((mode, extension))
    if kind is None:
        prefix = "Remote " if location == Location.REMOTE else ""
        label = _MODE_LABELS[mode]
        if prefix:
            label = label.lower()
        raise UnsupportedFileType(
            f"{prefix}{label} file type {extension or '(none)'} is not supported"
        )

    return Operation(kind=kind, location=location)
