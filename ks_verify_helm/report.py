"""
Run reporting: the final failure list, exit status and optional JSON summary.
"""

import json
import logging
from collections import Counter
from pathlib import Path
from typing import List

from .config import ERROR_CATEGORIES, STATUS_SUCCESS, STATUS_TIMEOUT
from .verifier import ChartResult, failed_charts

logger = logging.getLogger(__name__)


def categorize_error(error_msg: str) -> str:
    """Categorize an error message based on keywords."""
    if not error_msg:
        return "UNKNOWN_ERROR"

    error_msg_lower = error_msg.lower()

    # Ordered by specificity / common patterns
    if "kubeversion" in error_msg_lower and "incompatible" in error_msg_lower:
        return "KUBERNETES_VERSION_ERROR"
    if "timed out" in error_msg_lower or "timeout expired" in error_msg_lower:
        return "TIMEOUT_ERROR"
    if "required value" in error_msg_lower or "required field" in error_msg_lower:
        return "REQUIRED_VALUE_ERROR"
    if "is required" in error_msg_lower or "must be set" in error_msg_lower:
        return "REQUIRED_VALUE_ERROR"
    if "yaml:" in error_msg_lower or "invalid yaml" in error_msg_lower:
        return "YAML_ERROR"
    if "chart is deprecated" in error_msg_lower:
        return "DEPRECATED_ERROR"
    if "template" in error_msg_lower and (
        "error" in error_msg_lower or "failed" in error_msg_lower
    ):
        return "TEMPLATE_ERROR"
    if "prototype" in error_msg_lower or "package" in error_msg_lower:
        return "PACKAGE_ERROR"

    return "UNKNOWN_ERROR"


def report_failures(failures: List[str]) -> int:
    """Print the failure list if there is one and return the exit status."""
    if not failures:
        return 0

    print(json.dumps(failures))
    return 1


def build_summary(results: List[ChartResult], repo_url: str) -> dict:
    """Summarise a run: totals, per-status and per-category counts."""
    status_counts = Counter(r.status for r in results)
    category_counts = Counter(
        categorize_error(r.details) for r in results if r.status != STATUS_SUCCESS
    )
    total = len(results)

    return {
        "repository": repo_url,
        "total_charts": total,
        "success": status_counts.get(STATUS_SUCCESS, 0),
        "timeouts": status_counts.get(STATUS_TIMEOUT, 0),
        "status_counts": dict(status_counts),
        "error_categories": {
            category: {
                "description": ERROR_CATEGORIES[category],
                "count": count,
            }
            for category, count in category_counts.items()
        },
        "failures": failed_charts(results),
        "charts": [
            {
                "chart": r.chart_name,
                "index": r.index,
                "status": r.status,
                "failed": r.failed,
                "duration": round(r.duration, 3),
            }
            for r in results
        ],
    }


def write_summary_json(results: List[ChartResult], repo_url: str, path: Path):
    """Write the run summary to ``path`` as JSON."""
    summary = build_summary(results, repo_url)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(summary, f, indent=4)
    logger.info(f"Summary written to {path}")
