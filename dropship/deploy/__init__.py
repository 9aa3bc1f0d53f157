"""Deploy library: rendezvous, remote pipeline, bootstrap commands, orchestration."""

from dropship.deploy.bootstrap import bootstrap_commands, default_bootstrap_commands
from dropship.deploy.orchestrate import DeploymentResult, run_deploy, run_destroy
from dropship.deploy.pipeline import run_commands, run_pipeline, transfer_artifact
from dropship.deploy.rendezvous import RendezvousResult, rendezvous

__all__ = [
    "bootstrap_commands",
    "default_bootstrap_commands",
    "DeploymentResult",
    "run_deploy",
    "run_destroy",
    "run_commands",
    "run_pipeline",
    "transfer_artifact",
    "RendezvousResult",
    "rendezvous",
]
