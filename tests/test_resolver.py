"""
Unit tests for the Action Resolver
Tests the (mode, extension) table, product-code uninstall and failure paths
"""

import pytest

from autodeployer.errors import TargetError, UnsupportedFileType
from autodeployer.execution.resolver import (
    OPERATION_TABLE,
    Operation,
    OperationKind,
    file_extension,
    parse_product_code,
    resolve,
)
from autodeployer.models.deployment import ErrorKind, Location, Mode

PRODUCT_CODE = "{3F2504E0-4F89-11D3-9A0C-0305E82C3301}"

DOCUMENTED = [
    (Mode.RUN_SCRIPT, "deploy.ps1", OperationKind.POWERSHELL_SCRIPT),
    (Mode.RUN_SCRIPT, "deploy.bat", OperationKind.BATCH_SCRIPT),
    (Mode.RUN_SCRIPT, "deploy.cmd", OperationKind.BATCH_SCRIPT),
    (Mode.INSTALL, "setup.msi", OperationKind.MSI_INSTALL),
    (Mode.INSTALL, "hotfix.msp", OperationKind.MSP_INSTALL),
    (Mode.INSTALL, "setup.exe", OperationKind.EXE_INSTALL),
    (Mode.REPAIR, "setup.msi", OperationKind.MSI_REPAIR),
    (Mode.REPAIR, "hotfix.msp", OperationKind.MSP_REPAIR),
    (Mode.REPAIR, "setup.exe", OperationKind.EXE_REPAIR),
    (Mode.UNINSTALL, "setup.msi", OperationKind.MSI_UNINSTALL),
    (Mode.UNINSTALL, "hotfix.msp", OperationKind.MSP_UNINSTALL),
    (Mode.UNINSTALL, "setup.exe", OperationKind.EXE_UNINSTALL),
]


@pytest.mark.parametrize("location", [Location.LOCAL, Location.REMOTE])
@pytest.mark.parametrize("mode,file_ref,expected", DOCUMENTED)
def test_documented_combinations_resolve(location, mode, file_ref, expected):
    """Every documented (mode, extension) pair maps to its operation"""
    operation = resolve(location, mode, file_ref)

    assert operation.kind == expected
    assert operation.location == location
    assert operation.product_code is None


@pytest.mark.parametrize(
    "mode,file_ref",
    [
        (Mode.RUN_SCRIPT, "setup.msi"),
        (Mode.RUN_SCRIPT, "deploy.vbs"),
        (Mode.INSTALL, "deploy.ps1"),
        (Mode.INSTALL, "archive.zip"),
        (Mode.REPAIR, "deploy.bat"),
        (Mode.UNINSTALL, "deploy.cmd"),
        (Mode.INSTALL, "README"),
    ],
)
def test_unmatched_combinations_raise(mode, file_ref):
    """Anything outside the table fails with UnsupportedFileType"""
    with pytest.raises(UnsupportedFileType):
        resolve(Location.LOCAL, mode, file_ref)


def test_unsupported_file_type_is_target_scoped():
    """UnsupportedFileType degrades one target, it is not a batch-fatal error"""
    with pytest.raises(TargetError) as exc_info:
        resolve(Location.REMOTE, Mode.INSTALL, "archive.zip")

    assert exc_info.value.kind == ErrorKind.UNSUPPORTED_FILE_TYPE
    assert str(exc_info.value) == "Remote install file type .zip is not supported"


def test_local_error_message_names_mode():
    with pytest.raises(UnsupportedFileType, match="Script file type .vbs is not supported"):
        resolve(Location.LOCAL, Mode.RUN_SCRIPT, "deploy.vbs")


def test_extension_is_case_insensitive():
    """SETUP.MSI resolves the same as setup.msi"""
    assert resolve(Location.LOCAL, Mode.INSTALL, "SETUP.MSI").kind == OperationKind.MSI_INSTALL
    assert resolve(Location.LOCAL, Mode.RUN_SCRIPT, "Deploy.PS1").kind == OperationKind.POWERSHELL_SCRIPT


def test_extension_from_windows_path():
    assert file_extension(r"C:\Installers\App\setup.exe") == ".exe"
    assert file_extension("sub/dir/deploy.cmd") == ".cmd"
    assert file_extension("noextension") == ""


def test_uninstall_by_product_code():
    """A GUID-shaped file reference selects removal by identifier, not path"""
    operation = resolve(Location.REMOTE, Mode.UNINSTALL, PRODUCT_CODE)

    assert operation.kind == OperationKind.PRODUCT_CODE_UNINSTALL
    assert operation.product_code == PRODUCT_CODE


@pytest.mark.parametrize(
    "value",
    [
        "3F2504E0-4F89-11D3-9A0C-0305E82C3301",
        "{3f2504e0-4f89-11d3-9a0c-0305e82c3301}",
        "3F2504E04F8911D39A0C0305E82C3301",
    ],
)
def test_product_code_forms_are_canonicalized(value):
    assert parse_product_code(value) == PRODUCT_CODE


def test_non_guid_is_not_a_product_code():
    assert parse_product_code("setup.msi") is None
    assert parse_product_code("") is None


@pytest.mark.parametrize("mode", [Mode.INSTALL, Mode.REPAIR, Mode.RUN_SCRIPT])
def test_product_code_outside_uninstall_is_unsupported(mode):
    """Only Uninstall understands product identifiers"""
    with pytest.raises(UnsupportedFileType):
        resolve(Location.LOCAL, mode, PRODUCT_CODE)


def test_resolution_is_idempotent():
    """Same inputs always give equal operations"""
    first = resolve(Location.REMOTE, Mode.REPAIR, "setup.msi")
    second = resolve(Location.REMOTE, Mode.REPAIR, "setup.msi")

    assert first == second
    assert first == Operation(kind=OperationKind.MSI_REPAIR, location=Location.REMOTE)


def test_table_covers_every_mode():
    modes = {mode for mode, _ in OPERATION_TABLE}
    assert modes == set(Mode)


def test_description_mentions_location():
    operation = resolve(Location.LOCAL, Mode.INSTALL, "setup.msi")
    assert operation.description == "install MSI package (local)"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
