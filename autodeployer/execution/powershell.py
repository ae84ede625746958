"""
PowerShell Session Module
Probes, stages and launches deployment operations through powershell.exe

Local targets run the generated script directly; remote targets go through
PowerShell remoting (New-PSSession / Invoke-Command) using the identity of
the account running AutoDeployer.
"""

import subprocess
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from autodeployer.errors import InvocationFailure
from autodeployer.execution.interfaces import TargetSession
from autodeployer.execution.resolver import Operation, OperationKind
from autodeployer.models.deployment import IOResult, ProcessResult, is_localhost
from autodeployer.utils.logging_config import get_logger

logger = get_logger(__name__)

Runner = Callable[[Sequence[str]], "subprocess.CompletedProcess[str]"]

MSIEXEC = "msiexec.exe"

NO_EXIT_CODE = -1
NO_EXIT_CODE_MESSAGE = "The operation did not report an exit code"

# kind -> (program, argument template); None program means the file itself
PACKAGE_COMMANDS: Dict[OperationKind, Tuple[Optional[str], str]] = {
    OperationKind.MSI_INSTALL: (MSIEXEC, '/i "{path}"'),
    OperationKind.MSP_INSTALL: (MSIEXEC, '/p "{path}"'),
    OperationKind.EXE_INSTALL: (None, ""),
    OperationKind.MSI_REPAIR: (MSIEXEC, '/fa "{path}"'),
    OperationKind.MSP_REPAIR: (MSIEXEC, '/p "{path}" REINSTALLMODE=omus REINSTALL=ALL'),
    OperationKind.EXE_REPAIR: (None, ""),
    OperationKind.MSI_UNINSTALL: (MSIEXEC, '/x "{path}"'),
    OperationKind.MSP_UNINSTALL: (MSIEXEC, '/uninstall "{path}"'),
    OperationKind.EXE_UNINSTALL: (None, ""),
    OperationKind.PRODUCT_CODE_UNINSTALL: (MSIEXEC, "/x {path}"),
}


def ps_quote(value: str) -> str:
    """Wraps a value in a PowerShell single-quoted literal"""
    return "'" + value.replace("'", "''") + "'"


def _default_runner(command: Sequence[str]) -> "subprocess.CompletedProcess[str]":
    return subprocess.run(
        list(command), capture_output=True, text=True, errors="replace"
    )


def build_invocation_body(operation: Operation, path: str, arguments: str = "") -> str:
    """
    Builds the script block body for an operation.
    The body emits the process output and then the exit code as its last item.
    """
    if operation.kind == OperationKind.POWERSHELL_SCRIPT:
        return (
            "& powershell.exe -NoProfile -ExecutionPolicy Bypass -File "
            f"{ps_quote(path)}; $LASTEXITCODE"
        )
    if operation.kind == OperationKind.BATCH_SCRIPT:
        return f"& cmd.exe /c {ps_quote(path)}; $LASTEXITCODE"

    program, template = PACKAGE_COMMANDS[operation.kind]
    if program is None:
        program = path
    argument_list = " ".join(
        part for part in (template.format(path=path), arguments.strip()) if part
    )

    body = f"(Start-Process -FilePath {ps_quote(program)}"
    if argument_list:
        body += f" -ArgumentList {ps_quote(argument_list)}"
    return body + " -Wait -PassThru -NoNewWindow).ExitCode"


def build_invocation_script(
    operation: Operation, path: str, arguments: str = "", target: Optional[str] = None
) -> str:
    """Wraps the invocation body for local or remote execution"""
    body = build_invocation_body(operation, path, arguments)
    if operation.is_local or target is None:
        launcher = f"& {{ {body} }}"
    else:
        launcher = f"Invoke-Command -ComputerName {ps_quote(target)} -ScriptBlock {{ {body} }}"
    # Nothing returned (remoting refused, launch error) must not read as exit 0
    return (
        f"$r = @({launcher}); "
        "if ($r.Count -gt 1) { $r[0..($r.Count - 2)] | Out-String -Stream | Write-Output }; "
        "if ($r.Count -eq 0 -or $null -eq $r[-1]) { "
        f"[Console]::Error.WriteLine({ps_quote(NO_EXIT_CODE_MESSAGE)}); exit {NO_EXIT_CODE} }}; "
        "exit [int]$r[-1]"
    )


def signed_exit_code(returncode: int) -> int:
    """Windows reports exit codes as unsigned 32-bit values; -1 arrives as 4294967295"""
    if returncode > 0x7FFFFFFF:
        return returncode - 0x100000000
    return returncode


class PowerShellSession(TargetSession):
    """
    TargetSession backed by powershell.exe.
    One instance is opened per target task; the runner is injectable for testing.
    """

    def __init__(
        self,
        target: str,
        runner: Optional[Runner] = None,
        executable: str = "powershell.exe",
    ):
        self.target = target
        self.runner = runner or _default_runner
        self.executable = executable
        self._closed = False
        logger.debug(f"PowerShellSession opened for {target}")

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _command(self, script: str) -> List[str]:
        return [
            self.executable,
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy",
            "Bypass",
            "-Command",
            script,
        ]

    def _run(self, script: str) -> "subprocess.CompletedProcess[str]":
        if self._closed:
            raise RuntimeError(f"PowerShell session for {self.target} is closed")
        logger.debug(f"[{self.target}] PowerShell: {script}")
        return self.runner(self._command(script))

    def _run_io(self, script: str, action: str) -> IOResult:
        try:
            completed = self._run(script)
        except OSError as e:
            logger.warning(f"[{self.target}] {action} could not start PowerShell: {e}")
            return IOResult(ok=False, error=str(e))

        if completed.returncode != 0:
            error = (completed.stderr or "").strip() or f"exit code {completed.returncode}"
            logger.warning(f"[{self.target}] {action} failed: {error}")
            return IOResult(ok=False, error=error)

        logger.debug(f"[{self.target}] {action} succeeded")
        return IOResult(ok=True)

    # ------------------------------------------------------------------
    # ReachabilityProbe
    # ------------------------------------------------------------------

    def is_valid(self, target: str) -> bool:
        if is_localhost(target):
            return True

        name = ps_quote(target)
        script = (
            "$ok = $false; "
            f"try {{ $null = Get-ADComputer -Identity {name} -ErrorAction Stop; "
            f"$ok = Test-Connection -ComputerName {name} -Count 1 -Quiet }} "
            "catch { $ok = $false }; "
            "Write-Output $ok"
        )
        try:
            completed = self._run(script)
        except OSError as e:
            logger.warning(f"[{target}] Reachability probe could not start: {e}")
            return False

        valid = completed.returncode == 0 and (completed.stdout or "").strip().lower() == "true"
        logger.debug(f"[{target}] Reachability probe result: {valid}")
        return valid

    # ------------------------------------------------------------------
    # FileTransfer
    # ------------------------------------------------------------------

    def _copy_script(self, target: str, source: str, dest_path: str) -> str:
        dest = ps_quote(dest_path)
        if is_localhost(target):
            return (
                "$ErrorActionPreference = 'Stop'; "
                f"New-Item -ItemType Directory -Path {dest} -Force | Out-Null; "
                f"Copy-Item -Path {ps_quote(source)} -Destination {dest} -Recurse -Force"
            )
        return (
            "$ErrorActionPreference = 'Stop'; "
            f"$s = New-PSSession -ComputerName {ps_quote(target)}; "
            "try { "
            "Invoke-Command -Session $s -ScriptBlock { param($d) "
            f"New-Item -ItemType Directory -Path $d -Force | Out-Null }} -ArgumentList {dest}; "
            f"Copy-Item -Path {ps_quote(source)} -Destination {dest} -ToSession $s -Recurse -Force "
            "} finally { Remove-PSSession $s }"
        )

    def copy_file(self, target: str, src_file: str, dest_path: str) -> IOResult:
        return self._run_io(self._copy_script(target, src_file, dest_path), "Copy file")

    def copy_directory(self, target: str, src_dir: str, dest_path: str) -> IOResult:
        source = src_dir.rstrip("\\/") + "\\*"
        return self._run_io(self._copy_script(target, source, dest_path), "Copy directory")

    def remove_directory(self, target: str, path: str) -> IOResult:
        if is_localhost(target):
            script = f"Remove-Item -Path {ps_quote(path)} -Recurse -Force -ErrorAction Stop"
        else:
            script = (
                f"Invoke-Command -ComputerName {ps_quote(target)} -ScriptBlock {{ param($p) "
                f"Remove-Item -Path $p -Recurse -Force -ErrorAction Stop }} -ArgumentList {ps_quote(path)}"
            )
        return self._run_io(script, "Remove directory")

    # ------------------------------------------------------------------
    # Invoker
    # ------------------------------------------------------------------

    def invoke(
        self,
        operation: Operation,
        path: str,
        arguments: Optional[str] = None,
        target: Optional[str] = None,
    ) -> ProcessResult:
        script = build_invocation_script(operation, path, arguments or "", target)
        logger.info(f"[{target or 'localhost'}] Launching: {operation.description} -> {path}")

        try:
            completed = self._run(script)
        except OSError as e:
            raise InvocationFailure(f"Could not launch {operation.description}: {e}") from e

        exit_code = signed_exit_code(completed.returncode)
        logger.info(f"[{target or 'localhost'}] {operation.description} exited with code {exit_code}")
        return ProcessResult(
            exit_code=exit_code,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            logger.debug(f"PowerShellSession closed for {self.target}")


def powershell_session_factory(
    runner: Optional[Runner] = None, executable: str = "powershell.exe"
) -> Callable[[str], PowerShellSession]:
    """Returns a SessionFactory opening a PowerShellSession per target"""

    def factory(target: str) -> PowerShellSession:
        return PowerShellSession(target, runner=runner, executable=executable)

    return factory
