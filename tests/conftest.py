"""Shared fixtures: a scripted compiler, a captured console, and gem RBIs."""

from __future__ import annotations

import io
import threading
from pathlib import Path

import pytest

from rbisync.compiler.base import CompileResult
from rbisync.config import SyncConfig
from rbisync.output import create_console

FOO_BODY = """\
module Foo
  class << self
    def bar(a = T.unsafe(nil), b: T.unsafe(nil), **opts); end
  end
end

Foo::PI = T.let(T.unsafe(nil), Float)
"""

BAR_BODY = """\
module Bar
  class << self
    def bar(a = T.unsafe(nil), b: T.unsafe(nil), **opts); end
  end
end

Bar::PI = T.let(T.unsafe(nil), Float)
"""

BAZ_BODY = """\
module Baz; end

class Baz::Test
  def fizz; end
end
"""

FOO_RBI = """\
# typed: true

# DO NOT EDIT MANUALLY
# This is an autogenerated file for types exported from the `foo` gem.
# Please instead update this file by running `bin/tapioca gem foo`.

""" + FOO_BODY


class FakeCompiler:
    """Compiler double returning scripted results; unknown gems are missing specs."""

    def __init__(self, results: dict[str, CompileResult]):
        self.results = dict(results)
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def compile(self, name: str) -> CompileResult:
        with self._lock:
            self.calls.append(name)
        return self.results.get(name) or CompileResult.missing_spec(name)

    def dependency_names(self) -> list[str]:
        return sorted(self.results)


def default_gems() -> dict[str, CompileResult]:
    return {
        "foo": CompileResult.content("foo", "0.0.1", FOO_BODY),
        "bar": CompileResult.content("bar", "0.3.0", BAR_BODY),
        "baz": CompileResult.content("baz", "0.0.2", BAZ_BODY),
    }


@pytest.fixture
def compiler() -> FakeCompiler:
    return FakeCompiler(default_gems())


@pytest.fixture
def console():
    """Console writing to a buffer; read it back with ``console.file.getvalue()``."""
    return create_console(no_color=True, file=io.StringIO())


@pytest.fixture
def config(tmp_path: Path) -> SyncConfig:
    return SyncConfig(root=tmp_path, outdir="gems")


def touch(outdir: Path, *filenames: str) -> None:
    outdir.mkdir(parents=True, exist_ok=True)
    for filename in filenames:
        (outdir / filename).touch()
