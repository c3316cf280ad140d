"""
Wrappers around the ks subcommands used by the harness.

Every helper returns the ``subprocess.CompletedProcess`` of the call; none of
them raise on a non-zero exit. Callers decide which exit codes matter.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from .config import HELM_REGISTRY_NAME

logger = logging.getLogger(__name__)


def run_ks(
    ks_binary: str,
    args: List[str],
    cwd: Path,
    capture: bool = False,
    timeout: Optional[float] = None,
) -> subprocess.CompletedProcess:
    """Run ``ks`` with the given arguments inside ``cwd``.

    stdout is always discarded. stderr is captured as text when ``capture`` is
    set, otherwise discarded too. Undecodable stderr bytes are replaced.
    ``subprocess.TimeoutExpired`` propagates.
    """
    cmd = [ks_binary] + list(args)
    logger.debug(f"Running command: {' '.join(cmd)} (cwd={cwd})")
    return subprocess.run(
        cmd,
        cwd=str(cwd),
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE if capture else subprocess.DEVNULL,
        text=True,
        errors="replace",
        timeout=timeout,
    )


def init_app(ks_binary: str, app_name: str, cwd: Path) -> subprocess.CompletedProcess:
    return run_ks(ks_binary, ["init", app_name, "--skip-default-registries"], cwd)


def add_registry(ks_binary: str, url: str, cwd: Path) -> subprocess.CompletedProcess:
    return run_ks(ks_binary, ["registry", "add", HELM_REGISTRY_NAME, url], cwd)


def install_package(ks_binary: str, name: str, cwd: Path) -> subprocess.CompletedProcess:
    return run_ks(ks_binary, ["pkg", "install", f"{HELM_REGISTRY_NAME}/{name}"], cwd)


def create_module(ks_binary: str, name: str, cwd: Path) -> subprocess.CompletedProcess:
    return run_ks(ks_binary, ["module", "create", name], cwd)


def add_environment(ks_binary: str, name: str, cwd: Path) -> subprocess.CompletedProcess:
    return run_ks(ks_binary, ["env", "add", name], cwd)


def set_environment_targets(
    ks_binary: str, name: str, cwd: Path
) -> subprocess.CompletedProcess:
    """Point environment ``name`` at the module of the same name."""
    return run_ks(ks_binary, ["env", "targets", name, "--module", name], cwd)


def generate(ks_binary: str, name: str, cwd: Path) -> subprocess.CompletedProcess:
    """Generate component ``name.name`` from the chart's helm prototype."""
    return run_ks(
        ks_binary,
        ["generate", f"{HELM_REGISTRY_NAME}-{name}", f"{name}.{name}"],
        cwd,
        capture=True,
    )


def show(
    ks_binary: str, name: str, cwd: Path, timeout: Optional[float] = None
) -> subprocess.CompletedProcess:
    """Render environment ``name``. The child is killed if ``timeout`` elapses."""
    return run_ks(ks_binary, ["show", name], cwd, capture=True, timeout=timeout)
