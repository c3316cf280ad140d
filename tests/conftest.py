"""
Shared test fixtures for the ks-verify-helm test suite.

  - fake_ks: replaces subprocess.run with a scripted ks that records calls
  - repo_index: serves a given index.yaml through a mocked requests.get
"""

import subprocess
from unittest import mock

import pytest
import yaml


class FakeKs:
    """Scripted stand-in for the ks binary.

    Charts listed in ``generate_failures`` / ``show_failures`` exit 1 on that
    step with the mapped stderr; charts in ``show_timeouts`` raise
    ``TimeoutExpired`` from show. Everything else exits 0. ``hooks`` maps a
    subcommand to a callable run with its arguments before it returns.
    """

    def __init__(self):
        self.calls = []
        self.generate_failures = {}
        self.show_failures = {}
        self.show_timeouts = set()
        self.setup_returncode = 0
        self.hooks = {}

    def __call__(
        self, cmd, cwd=None, stdout=None, stderr=None, text=None, errors=None, timeout=None
    ):
        args = list(cmd[1:])
        self.calls.append({"args": args, "cwd": cwd, "timeout": timeout})
        if args[0] in self.hooks:
            self.hooks[args[0]](args)
        returncode, err = self._outcome(args)
        if timeout is not None and args[0] == "show" and args[1] in self.show_timeouts:
            raise subprocess.TimeoutExpired(cmd, timeout)
        captured = err if stderr == subprocess.PIPE else None
        return subprocess.CompletedProcess(cmd, returncode, stdout=None, stderr=captured)

    def _outcome(self, args):
        if args[0] == "generate":
            name = args[2].split(".")[0]
            if name in self.generate_failures:
                return 1, self.generate_failures[name]
            return 0, ""
        if args[0] == "show":
            if args[1] in self.show_failures:
                return 1, self.show_failures[args[1]]
            return 0, ""
        if args[0] == "init":
            return 0, ""
        return self.setup_returncode, ""

    def commands(self, subcommand, name=None):
        """Recorded argument lists for ``subcommand``, optionally for one chart."""
        found = []
        for call in self.calls:
            args = call["args"]
            if args[0] != subcommand:
                continue
            if name is not None and name not in args and f"{name}.{name}" not in args:
                continue
            found.append(args)
        return found


@pytest.fixture
def fake_ks(monkeypatch):
    fake = FakeKs()
    monkeypatch.setattr("ks_verify_helm.ks.subprocess.run", fake)
    return fake


def make_index(*names):
    """Build a minimal Helm repository index dict."""
    return {
        "apiVersion": "v1",
        "entries": {
            name: [{"name": name, "version": "1.0.0", "urls": [f"{name}-1.0.0.tgz"]}]
            for name in names
        },
        "generated": "2018-03-01T00:00:00Z",
    }


@pytest.fixture
def repo_index(monkeypatch):
    """Return a function that makes requests.get serve an index of the given charts."""

    def serve(*names):
        index = make_index(*names)
        response = mock.Mock()
        response.text = yaml.safe_dump(index, sort_keys=False)
        response.raise_for_status.return_value = None
        get = mock.Mock(return_value=response)
        monkeypatch.setattr("ks_verify_helm.repository.requests.get", get)
        return get

    return serve
