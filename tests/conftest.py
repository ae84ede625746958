"""
Shared fixtures: an in-memory TargetSession that records every call
"""

import threading
from typing import Callable, Dict, List, Optional, Set, Tuple

import pytest

from autodeployer.execution.interfaces import TargetSession
from autodeployer.execution.resolver import Operation
from autodeployer.models.deployment import BatchConfig, IOResult, ProcessResult


class FakeFleet:
    """Scripted behaviour for every target, plus a thread-safe call log"""

    def __init__(self):
        self.unreachable: Set[str] = set()
        self.copy_fails: Set[str] = set()
        self.cleanup_fails: Set[str] = set()
        self.invoke_results: Dict[str, ProcessResult] = {}
        self.invoke_raises: Dict[str, Exception] = {}
        self.blocking: Set[str] = set()
        # call name -> callback(*call_args), run after the call is recorded
        self.hooks: Dict[str, Callable] = {}
        self.release = threading.Event()
        self.calls: List[Tuple] = []
        self.opened: List[str] = []
        self.closed: List[str] = []
        self._lock = threading.Lock()

    def record(self, *call):
        with self._lock:
            self.calls.append(call)
        hook = self.hooks.get(call[0])
        if hook is not None:
            hook(*call[1:])

    def calls_for(self, target: str, name: Optional[str] = None) -> List[Tuple]:
        return [
            c for c in self.calls if c[1] == target and (name is None or c[0] == name)
        ]

    def factory(self, target: str) -> "FakeSession":
        with self._lock:
            self.opened.append(target)
        return FakeSession(target, self)


class FakeSession(TargetSession):
    def __init__(self, target: str, fleet: FakeFleet):
        self.target = target
        self.fleet = fleet

    def is_valid(self, target: str) -> bool:
        self.fleet.record("is_valid", target)
        return target not in self.fleet.unreachable

    def copy_file(self, target, src_file, dest_path) -> IOResult:
        self.fleet.record("copy_file", target, src_file, dest_path)
        if target in self.fleet.copy_fails:
            return IOResult(ok=False, error="Access is denied")
        return IOResult(ok=True)

    def copy_directory(self, target, src_dir, dest_path) -> IOResult:
        self.fleet.record("copy_directory", target, src_dir, dest_path)
        if target in self.fleet.copy_fails:
            return IOResult(ok=False, error="Access is denied")
        return IOResult(ok=True)

    def remove_directory(self, target, path) -> IOResult:
        self.fleet.record("remove_directory", target, path)
        if target in self.fleet.cleanup_fails:
            raise OSError("The network path was not found")
        return IOResult(ok=True)

    def invoke(
        self,
        operation: Operation,
        path: str,
        arguments: Optional[str] = None,
        target: Optional[str] = None,
    ) -> ProcessResult:
        self.fleet.record("invoke", self.target, operation, path, arguments, target)
        if self.target in self.fleet.blocking:
            self.fleet.release.wait(timeout=10)
        if self.target in self.fleet.invoke_raises:
            raise self.fleet.invoke_raises[self.target]
        return self.fleet.invoke_results.get(
            self.target, ProcessResult(exit_code=0, stdout="done")
        )

    def close(self) -> None:
        with self.fleet._lock:
            self.fleet.closed.append(self.target)


@pytest.fixture
def fleet():
    fake = FakeFleet()
    yield fake
    # Unblock any worker left waiting after a timeout test
    fake.release.set()


def make_config(**overrides) -> BatchConfig:
    values = {
        "app_name": "TestApp",
        "source_items": r"\\fileserver\share\testapp\setup.msi",
        "copy_source_items": False,
        "mode": "Install",
        "file": "setup.msi",
        "arguments": "/qn",
        "timeout_ms": 5000,
        "target_computers": ["localhost"],
    }
    values.update(overrides)
    return BatchConfig(**values)


@pytest.fixture
def config_factory():
    return make_config
