"""
Per-chart verification loop.

Each chart goes through best-effort setup (package install, module,
environment, targets), then generate, then show. Only generate and show
outcomes are checked.
"""

import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List

from . import ks
from .config import (
    RENDER_TIMEOUT,
    STATUS_GENERATE_ERROR,
    STATUS_SHOW_ERROR,
    STATUS_SUCCESS,
    STATUS_TIMEOUT,
)
from .workspace import Workspace

logger = logging.getLogger(__name__)


@dataclass
class ChartResult:
    chart_name: str
    index: int  # 1-based position in the run
    status: str  # SUCCESS, GENERATE_ERROR, SHOW_ERROR or TIMEOUT
    details: str  # Captured stderr, or the timeout message
    failed: bool
    duration: float


def _print_stderr(stderr: str):
    print((stderr or "").rstrip("\n"))


def prepare_chart(ks_binary: str, name: str, app_dir: Path):
    """Install the chart package and give it a module and environment.

    None of these exit codes are checked. A broken step surfaces as a generate
    or show failure for the same chart.
    """
    steps = [
        ks.install_package,
        ks.create_module,
        ks.add_environment,
        ks.set_environment_targets,
    ]
    for step in steps:
        result = step(ks_binary, name, app_dir)
        if result.returncode != 0:
            logger.debug(f"{step.__name__} for {name} exited with {result.returncode}")


def verify_chart(
    ks_binary: str,
    name: str,
    index: int,
    app_dir: Path,
    timeout: float = RENDER_TIMEOUT,
    fail_on_timeout: bool = False,
) -> ChartResult:
    """Set up, generate and show a single chart."""
    print(f"checking {index}: {name}")
    start_time = time.time()

    prepare_chart(ks_binary, name, app_dir)

    result = ks.generate(ks_binary, name, app_dir)
    if result.returncode != 0:
        print(f"generating {name} failure:")
        _print_stderr(result.stderr)
        return ChartResult(
            name,
            index,
            STATUS_GENERATE_ERROR,
            result.stderr or "",
            True,
            time.time() - start_time,
        )

    try:
        result = ks.show(ks_binary, name, app_dir, timeout=timeout)
    except subprocess.TimeoutExpired:
        print(f"timed out showing {name}")
        return ChartResult(
            name,
            index,
            STATUS_TIMEOUT,
            f"Show timed out after {timeout} seconds",
            fail_on_timeout,
            time.time() - start_time,
        )

    if result.returncode != 0:
        print(f"{name} failed")
        _print_stderr(result.stderr)
        return ChartResult(
            name,
            index,
            STATUS_SHOW_ERROR,
            result.stderr or "",
            True,
            time.time() - start_time,
        )

    return ChartResult(name, index, STATUS_SUCCESS, "", False, time.time() - start_time)


def verify_charts(
    ks_binary: str,
    workspace: Workspace,
    repo_url: str,
    charts: List[str],
    timeout: float = RENDER_TIMEOUT,
    fail_on_timeout: bool = False,
) -> List[ChartResult]:
    """Register the chart repository once, then verify each chart in order."""
    app_dir = workspace.app_dir

    result = ks.add_registry(ks_binary, repo_url, app_dir)
    if result.returncode != 0:
        logger.debug(f"registry add for {repo_url} exited with {result.returncode}")

    results = []
    for index, name in enumerate(charts, start=1):
        results.append(
            verify_chart(
                ks_binary,
                name,
                index,
                app_dir,
                timeout=timeout,
                fail_on_timeout=fail_on_timeout,
            )
        )
    return results


def failed_charts(results: List[ChartResult]) -> List[str]:
    """Names of failed charts, in run order."""
    return [r.chart_name for r in results if r.failed]
