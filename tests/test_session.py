"""End-to-end runs of sync and verify against a fake compiler."""

import pytest
from conftest import FOO_RBI, touch

from rbisync.compiler.base import CompileResult
from rbisync.errors import AmbiguousArtifactError, FatalCompileError
from rbisync.sync.session import SyncSession


def _snapshot(outdir):
    return {p.name: p.read_bytes() for p in sorted(outdir.iterdir())}


def test_sync_generates_all(config, compiler, console):
    result = SyncSession(config, compiler, console).sync()
    outdir = config.outdir_path

    assert result.ok
    assert sorted(_snapshot(outdir)) == ["bar@0.3.0.rbi", "baz@0.0.2.rbi", "foo@0.0.1.rbi"]
    assert (outdir / "foo@0.0.1.rbi").read_text() == FOO_RBI
    out = console.file.getvalue()
    assert (
        "Processing 'foo' gem:\n"
        "  Compiling foo, this may take a few seconds...   Done\n"
        f"      create  {outdir}/foo@0.0.1.rbi\n"
        "\n"
    ) in out
    assert out.index("Generating RBI files") < out.index("Processing 'bar'")


def test_sync_is_idempotent(config, compiler, console):
    SyncSession(config, compiler, console).sync()
    console.file.seek(0)
    console.file.truncate()

    result = SyncSession(config, compiler, console).sync()
    out = console.file.getvalue()

    assert not result.plan.has_changes
    assert len(result.plan.unchanged) == 3
    assert "-- Removing:" not in out
    assert "      create" not in out
    assert "-> Moving:" not in out
    # unchanged gems are never mentioned
    out_without_paths = out.replace(str(config.outdir_path), "")
    for name in ("foo", "bar", "baz"):
        assert name not in out_without_paths
    assert (
        "Removing RBI files of gems that have been removed:\n\n  Nothing to do.\n"
    ) in out
    assert (
        "Generating RBI files of gems that are added or updated:\n\n  Nothing to do.\n"
    ) in out


def test_sync_respects_exclude(config, compiler, console):
    SyncSession(config, compiler, console).sync()
    outdir = config.outdir_path
    console.file.seek(0)
    console.file.truncate()

    SyncSession(config, compiler, console).sync(exclude=["foo", "bar"])
    out = console.file.getvalue()

    assert f"-- Removing: {outdir}/foo@0.0.1.rbi\n" in out
    assert f"-- Removing: {outdir}/bar@0.3.0.rbi\n" in out
    assert f"-- Removing: {outdir}/baz@0.0.2.rbi\n" not in out
    assert out.index("bar@0.3.0.rbi") < out.index("foo@0.0.1.rbi")
    assert list(_snapshot(outdir)) == ["baz@0.0.2.rbi"]


def test_config_exclude_applies(config, compiler, console):
    config = config.with_overrides(exclude=("baz",))
    SyncSession(config, compiler, console).sync()
    assert sorted(_snapshot(config.outdir_path)) == ["bar@0.3.0.rbi", "foo@0.0.1.rbi"]


def test_verify_excluded_files_reported_as_removed(config, compiler, console):
    SyncSession(config, compiler, console).sync()
    outdir = config.outdir_path
    before = _snapshot(outdir)
    console.file.seek(0)
    console.file.truncate()

    result = SyncSession(config, compiler, console).verify(exclude=["foo", "bar"])

    assert result.ok is False
    assert console.file.getvalue().endswith(
        "Reason:\n"
        "  File(s) removed:\n"
        f"  - {outdir}/bar@0.3.0.rbi\n"
        f"  - {outdir}/foo@0.0.1.rbi\n"
    )
    assert _snapshot(outdir) == before


def test_verify_up_to_date_is_silent_about_compiling(config, compiler, console):
    SyncSession(config, compiler, console).sync()
    console.file.seek(0)
    console.file.truncate()

    result = SyncSession(config, compiler, console).verify()

    assert result.ok is True
    assert console.file.getvalue() == (
        "Checking for out-of-date RBIs...\n\nNothing to do, all RBIs are up-to-date.\n"
    )


def test_version_change_renames(config, compiler, console):
    outdir = config.outdir_path
    touch(outdir, "bar@0.0.1.rbi")

    result = SyncSession(config, compiler, console).sync()
    out = console.file.getvalue()

    assert [e.name for e in result.plan.moved] == ["bar"]
    assert f"-> Moving: {outdir}/bar@0.0.1.rbi to {outdir}/bar@0.3.0.rbi\n" in out
    assert f"-- Removing: {outdir}/bar@0.0.1.rbi" not in out
    assert not (outdir / "bar@0.0.1.rbi").exists()
    assert (outdir / "bar@0.3.0.rbi").read_bytes() == result.plan.moved[0].expected.content


def test_orphan_is_removed(config, compiler, console):
    SyncSession(config, compiler, console).sync()
    touch(config.outdir_path, "outdated@5.0.0.rbi")

    result = SyncSession(config, compiler, console).sync()
    assert [e.name for e in result.plan.removed] == ["outdated"]
    assert not (config.outdir_path / "outdated@5.0.0.rbi").exists()


def test_empty_output(config, compiler, console):
    compiler.results["qux"] = CompileResult.empty("qux", "0.5.0")
    SyncSession(config, compiler, console).sync()
    out = console.file.getvalue()

    assert "Compiling qux, this may take a few seconds...   Done (empty output)\n" in out
    assert f"      create  {config.outdir_path}/qux@0.5.0.rbi\n" in out
    assert (config.outdir_path / "qux@0.5.0.rbi").read_text().endswith(
        "# THIS IS AN EMPTY RBI FILE.\n"
        "# see https://github.com/Shopify/tapioca/wiki/Manual-Gem-Requires\n"
    )


def test_missing_spec_not_generated(config, compiler, console):
    compiler.results["minitest-excludes"] = CompileResult.missing_spec("minitest-excludes", "2.0.1")
    SyncSession(config, compiler, console).sync()
    out = console.file.getvalue()

    assert "    completed with missing specs:   minitest-excludes (2.0.1)\n" in out
    assert "Compiling minitest-excludes" not in out
    assert not list(config.outdir_path.glob("minitest-excludes@*"))


def test_fatal_error_leaves_directory_untouched(config, compiler, console):
    SyncSession(config, compiler, console).sync()
    outdir = config.outdir_path
    touch(outdir, "outdated@5.0.0.rbi")
    (outdir / "foo@0.0.1.rbi").write_text("stale")
    before = _snapshot(outdir)

    compiler.results["qux"] = CompileResult.empty("qux", "0.5.0")
    compiler.results["baz"] = CompileResult.fatal(
        "baz", "LoadError: cannot load such file -- foo/will_fail"
    )
    console.file.seek(0)
    console.file.truncate()

    with pytest.raises(FatalCompileError, match="cannot load such file -- foo/will_fail"):
        SyncSession(config, compiler, console).sync()

    assert _snapshot(outdir) == before
    assert console.file.getvalue() == ""


def test_explicit_names_scope_the_directory(config, compiler, console):
    outdir = config.outdir_path
    touch(outdir, "outdated@5.0.0.rbi", "bar@0.0.1.rbi")

    result = SyncSession(config, compiler, console).sync(["foo"])

    assert [e.name for e in result.plan.added] == ["foo"]
    assert not result.plan.removed
    assert not result.plan.moved
    assert sorted(_snapshot(outdir)) == ["bar@0.0.1.rbi", "foo@0.0.1.rbi", "outdated@5.0.0.rbi"]


def test_ambiguous_artifacts_abort(config, compiler, console):
    touch(config.outdir_path, "foo@0.0.1.rbi", "foo@0.0.2.rbi")
    with pytest.raises(AmbiguousArtifactError):
        SyncSession(config, compiler, console).sync()
    assert sorted(_snapshot(config.outdir_path)) == ["foo@0.0.1.rbi", "foo@0.0.2.rbi"]
