"""
Execution Module
"""

from .executor import TargetExecutor
from .interfaces import FileTransfer, Invoker, ReachabilityProbe, SessionFactory, TargetSession
from .powershell import PowerShellSession, powershell_session_factory
from .resolver import Operation, OperationKind, resolve

__all__ = [
    "TargetExecutor",
    "FileTransfer",
    "Invoker",
    "ReachabilityProbe",
    "SessionFactory",
    "TargetSession",
    "PowerShellSession",
    "powershell_session_factory",
    "Operation",
    "OperationKind",
    "resolve",
]
