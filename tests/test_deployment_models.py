"""
Unit tests for deployment data models
"""

import pytest
from pydantic import ValidationError

from autodeployer.errors import TargetUnreachable, TaskCancelled, TimeoutExceeded
from autodeployer.models.deployment import (
    ErrorKind,
    Location,
    Outcome,
    ProcessResult,
    is_localhost,
    location_for,
)


@pytest.mark.parametrize("target", ["localhost", "LOCALHOST", " LocalHost "])
def test_localhost_matched_case_insensitively(target):
    assert is_localhost(target)
    assert location_for(target) == Location.LOCAL


def test_other_names_are_remote():
    assert not is_localhost("localhost2")
    assert location_for("PC1") == Location.REMOTE
    assert location_for("127.0.0.1") == Location.REMOTE


def test_failure_outcome():
    outcome = Outcome.failure("PC1", ErrorKind.TRANSFER_FAILURE, "Files could not be copied")

    assert outcome.exit_code == -1
    assert not outcome.succeeded
    assert outcome.error_kind == ErrorKind.TRANSFER_FAILURE


def test_outcome_from_process_result_blank_streams():
    """Empty stdout/stderr are stored as None"""
    outcome = Outcome.from_process_result("PC1", ProcessResult(exit_code=0, stdout="", stderr=""))

    assert outcome.output is None
    assert outcome.error_message is None
    assert outcome.error_kind is None


def test_outcome_is_immutable():
    outcome = Outcome(target="PC1", exit_code=0)

    with pytest.raises(ValidationError):
        outcome.exit_code = 1

@pytest.mark.parametrize(
    "error,kind",
    [
        (TargetUnreachable("offline"), ErrorKind.TARGET_UNREACHABLE),
        (TimeoutExceeded("Task timed out"), ErrorKind.TIMEOUT_EXCEEDED),
        (TaskCancelled("Task was cancelled"), ErrorKind.CANCELLED),
    ],
)
def test_target_error_to_outcome(error, kind):
    outcome = error.to_outcome("PC1")

    assert outcome == Outcome(
        target="PC1", exit_code=-1, error_message=str(error), error_kind=kind
    )



if __name__ == "__main__":
    pytest.main([__file__, "-v"])
