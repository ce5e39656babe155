"""Shared fixtures: an in-process build graph double and a fake bazel binary."""

import json
import sys
import textwrap
from pathlib import Path

import pytest

from buildctx.errors import QueryFailed


class FakeClient:
    """Answers the three query shapes from canned data and records calls.

    *deps* is either a list returned for every dependency query or a dict
    keyed by depth.
    """

    def __init__(self, package="pkg", deps=None, rdeps=None, fail_resolve=False):
        self.package = package
        self.deps = deps if deps is not None else []
        self.rdeps = rdeps if rdeps is not None else []
        self.fail_resolve = fail_resolve
        self.calls = []

    def resolve_package(self, path):
        self.calls.append(("resolve_package", path))
        if self.fail_resolve:
            raise QueryFailed(["bazel", "query", path], 7, "ERROR: no such package")
        return self.package

    def query_dependencies(self, scope, depth):
        self.calls.append(("query_dependencies", scope, depth))
        if isinstance(self.deps, dict):
            return list(self.deps.get(depth, []))
        return list(self.deps)

    def find_reverse_dependents(self, package, path, depth):
        self.calls.append(("find_reverse_dependents", package, path, depth))
        return list(self.rdeps)


@pytest.fixture
def fake_client():
    return FakeClient


_FAKE_BAZEL = textwrap.dedent("""\
    import json
    import os
    import sys

    args = sys.argv[1:]
    log = os.environ.get("FAKE_BAZEL_LOG")
    if log:
        with open(log, "a", encoding="utf-8") as f:
            f.write(json.dumps(args) + "\\n")

    with open(os.environ["FAKE_BAZEL_DATA"], encoding="utf-8") as f:
        data = json.load(f)

    output = next(a for a in args if a.startswith("--output=")).split("=", 1)[1]
    resp = data.get(output, {})
    if "stdout_hex" in resp:
        sys.stdout.buffer.write(bytes.fromhex(resp["stdout_hex"]))
    else:
        sys.stdout.write(resp.get("stdout", ""))
    sys.stderr.write(resp.get("stderr", ""))
    sys.exit(resp.get("code", 0))
""")


@pytest.fixture
def fake_bazel(tmp_path, monkeypatch):
    """Write an executable stand-in for ``bazel`` and return a configurer.

    Call the returned function with a mapping of output kind
    (``package``, ``location``, ``label``) to ``{"stdout", "stderr",
    "code"}``; it returns the script path.  Invocations are appended as
    JSON argv lists to ``tmp_path / "bazel.log"``.
    """
    bin_dir = tmp_path / "fakebin"
    bin_dir.mkdir()
    script = bin_dir / "bazel"
    script.write_text(f"#!{sys.executable}\n" + _FAKE_BAZEL, encoding="utf-8")
    script.chmod(0o755)
    data_path = bin_dir / "responses.json"
    log_path = tmp_path / "bazel.log"
    monkeypatch.setenv("FAKE_BAZEL_DATA", str(data_path))
    monkeypatch.setenv("FAKE_BAZEL_LOG", str(log_path))

    def configure(responses: dict) -> Path:
        data_path.write_text(json.dumps(responses), encoding="utf-8")
        return script

    configure({})
    return configure


@pytest.fixture
def write_lines():
    """Return a helper that writes an n-line text file and returns its path."""

    def _write(path: Path, n: int, prefix: str = "line") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{prefix} {i}\n" for i in range(n)), encoding="utf-8")
        return path

    return _write
