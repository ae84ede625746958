"""
Orchestrator Module
Batch fan-out, per-target timeout supervision and the end-to-end run
"""

from autodeployer.orchestrator.batch_orchestrator import BatchOrchestrator
from autodeployer.orchestrator.deployment_run import DeploymentRun
from autodeployer.orchestrator.supervisor import TimeoutSupervisor

__all__ = ["BatchOrchestrator", "DeploymentRun", "TimeoutSupervisor"]
