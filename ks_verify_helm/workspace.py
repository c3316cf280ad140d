"""
Throwaway ks application workspace.

The workspace is a temporary directory holding a freshly initialised ks app.
It only exists for the duration of the ``provision_workspace`` block.
"""

import logging
import random
import shutil
import string
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from . import ks
from .config import APP_NAME_LENGTH, WORKSPACE_PREFIX

logger = logging.getLogger(__name__)


class KsNotFoundError(Exception):
    """Exception raised when the ks binary cannot be located."""

    pass


@dataclass
class Workspace:
    tmp_dir: Path
    app_name: str

    @property
    def app_dir(self) -> Path:
        return self.tmp_dir / self.app_name


def find_ks_binary(ks_binary: str) -> str:
    """Resolve ``ks_binary`` to an executable path."""
    resolved = shutil.which(ks_binary)
    if not resolved:
        raise KsNotFoundError(
            f"ks binary not found: {ks_binary}. Install ks or pass --ks-binary."
        )
    return resolved


def generate_app_name(length: int = APP_NAME_LENGTH) -> str:
    """Random uppercase name for the app scaffold."""
    return "".join(random.choices(string.ascii_uppercase, k=length))


@contextmanager
def provision_workspace(
    ks_binary: str, tmp_root: Optional[Path] = None
) -> Iterator[Workspace]:
    """Create a temp dir with a new ks app in it and remove it on exit.

    ``ks init`` runs with its output discarded and its exit status ignored: if
    it fails, every chart fails later and the cause shows up there.
    """
    with tempfile.TemporaryDirectory(
        prefix=WORKSPACE_PREFIX, dir=str(tmp_root) if tmp_root else None
    ) as tmp_dir:
        workspace = Workspace(tmp_dir=Path(tmp_dir), app_name=generate_app_name())
        logger.debug(f"Initialising ks app {workspace.app_name} in {tmp_dir}")

        result = ks.init_app(ks_binary, workspace.app_name, workspace.tmp_dir)
        if result.returncode != 0:
            logger.debug(f"ks init exited with {result.returncode}, continuing")
        # Later ks calls run from here; without an app they fail on their own
        workspace.app_dir.mkdir(exist_ok=True)

        yield workspace
