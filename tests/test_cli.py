"""
End-to-end tests for the command-line entry point and DeploymentRun
"""

import pytest

from autodeployer import cli
from autodeployer.models.deployment import ProcessResult
from autodeployer.orchestrator.deployment_run import DeploymentRun


def test_deployment_run_exports_csv(tmp_path, fleet, config_factory):
    fleet.unreachable.add("PC2")
    config = config_factory(target_computers=["localhost", "PC2"])

    run = DeploymentRun(
        config,
        log_dir=str(tmp_path),
        session_factory=fleet.factory,
        print_summary=False,
    )
    result = run.execute()

    assert len(result.outcomes) == 2
    assert run.report_path.parent == tmp_path
    assert run.report_path.name.startswith("testapp_Install_")
    content = run.report_path.read_text(encoding="utf-8")
    assert "PC2,-1" in content


def test_cli_exit_codes(tmp_path, fleet, monkeypatch, config_factory):
    """0 when all targets succeed, 1 when any target fails"""
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    config = config_factory(target_computers=["localhost", "PC2"])
    monkeypatch.setattr(cli, "load_settings", lambda env_file=None: config)

    class FleetRun(DeploymentRun):
        def __init__(self, config, log_dir, observer):
            super().__init__(
                config, log_dir=log_dir, session_factory=fleet.factory, observer=observer
            )

    monkeypatch.setattr(cli, "DeploymentRun", FleetRun)

    assert cli.main(["--log-dir", str(tmp_path)]) == 0

    fleet.invoke_results["PC2"] = ProcessResult(exit_code=1603, stderr="Fatal error")
    assert cli.main(["--log-dir", str(tmp_path)]) == 1


def test_cli_configuration_error_exit_code(tmp_path, capsys, monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    code = cli.main(["--env-file", str(tmp_path / "missing.env"), "--log-dir", str(tmp_path)])

    assert code == 2
    assert "CONFIGURATION ERROR" in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
