"""
Verify that the charts in a Helm repository generate and render with ks.

usage: ks-verify-helm [helm repo URL]
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_HELM_REPO_URL, KS_BINARY, KS_VERIFY_TIMEOUT
from .report import report_failures, write_summary_json
from .repository import chart_names, fetch_repository_index, select_charts
from .verifier import ChartResult, failed_charts, verify_charts
from .workspace import KsNotFoundError, find_ks_binary, provision_workspace


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Verify charts in a Helm repository render with ks."
    )
    parser.add_argument(
        "repo_url",
        nargs="?",
        default=DEFAULT_HELM_REPO_URL,
        help=f"Helm repository index URL (default: {DEFAULT_HELM_REPO_URL})",
    )
    parser.add_argument(
        "--ks-binary", default=KS_BINARY, help="Path or name of the ks binary"
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=KS_VERIFY_TIMEOUT,
        help="Timeout in seconds for ks show",
    )
    parser.add_argument(
        "--chart-filter", default=None, help="Regex pattern to filter chart names"
    )
    parser.add_argument(
        "--skip-charts", default=None, help="Comma-separated list of charts to skip"
    )
    parser.add_argument(
        "--max-charts", type=int, default=None, help="Maximum number of charts to check"
    )
    parser.add_argument(
        "--fail-on-timeout",
        action="store_true",
        help="Count a timed out ks show as a failure",
    )
    parser.add_argument(
        "--summary-json", type=Path, default=None, help="Write a JSON run summary here"
    )
    parser.add_argument(
        "--tmp-root",
        type=Path,
        default=None,
        help="Directory to create the throwaway ks app in (default: system temp)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output to console"
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace, ks_binary: str) -> List[ChartResult]:
    """Provision a workspace, fetch the index and verify every selected chart."""
    with provision_workspace(ks_binary, tmp_root=args.tmp_root) as workspace:
        index = fetch_repository_index(args.repo_url)
        charts = select_charts(
            chart_names(index),
            chart_filter=args.chart_filter,
            skip_charts=args.skip_charts,
            max_charts=args.max_charts,
        )
        return verify_charts(
            ks_binary,
            workspace,
            args.repo_url,
            charts,
            timeout=args.timeout,
            fail_on_timeout=args.fail_on_timeout,
        )


def _raise_terminated(signum, frame):
    # Unwind like an exit so the workspace context removes its directory
    raise SystemExit(128 + signum)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        ks_binary = find_ks_binary(args.ks_binary)
    except KsNotFoundError as e:
        print(f"Error: {e}")
        return 1

    prev_handler = signal.signal(signal.SIGTERM, _raise_terminated)
    try:
        results = run(args, ks_binary)
    finally:
        signal.signal(signal.SIGTERM, prev_handler)

    if args.summary_json:
        write_summary_json(results, args.repo_url, args.summary_json)

    return report_failures(failed_charts(results))


if __name__ == "__main__":
    sys.exit(main())
