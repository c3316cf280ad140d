"""
Helm chart repository index fetching and chart selection.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import requests
import yaml

logger = logging.getLogger(__name__)


class RepositoryIndexError(Exception):
    """Exception raised when a repository index has no entries mapping."""

    pass


def fetch_repository_index(url: str) -> Dict[str, Any]:
    """Download and parse a Helm repository ``index.yaml``.

    There is no retry and no timeout. Network, HTTP and YAML errors propagate
    to the caller unchanged.
    """
    logger.debug(f"Fetching repository index from {url}")
    response = requests.get(url)
    response.raise_for_status()

    index = yaml.safe_load(response.text)
    if not isinstance(index, dict) or "entries" not in index:
        raise RepositoryIndexError(f"No 'entries' mapping in repository index at {url}")
    # An index with no charts may serialise entries as null
    if index["entries"] is None:
        index["entries"] = {}
    if not isinstance(index["entries"], dict):
        raise RepositoryIndexError(
            f"Expected 'entries' to be a mapping, got {type(index['entries']).__name__}"
        )

    logger.debug(f"Repository index lists {len(index['entries'])} charts")
    return index


def chart_names(index: Dict[str, Any]) -> List[str]:
    """Chart names in the order the index lists them.

    YAML keys such as ``2048`` load as ints; ks only takes strings.
    """
    return [str(name) for name in index["entries"]]


def select_charts(
    names: List[str],
    chart_filter: Optional[str] = None,
    skip_charts: Optional[str] = None,
    max_charts: Optional[int] = None,
) -> List[str]:
    """Apply the regex filter, skip list and limit, keeping index order."""
    charts = list(names)

    if chart_filter:
        pattern = re.compile(chart_filter)
        charts = [c for c in charts if pattern.search(c)]
        print(f"Filtered to {len(charts)} charts matching pattern: {chart_filter}")

    if skip_charts:
        skip_list = [s.strip() for s in skip_charts.split(",") if s.strip()]
        charts = [c for c in charts if c not in skip_list]
        print(f"Skipping {len(skip_list)} charts: {', '.join(skip_list)}")

    if max_charts is not None and max_charts > 0:
        charts = charts[:max_charts]
        print(f"Limited to {max_charts} charts")

    return charts
