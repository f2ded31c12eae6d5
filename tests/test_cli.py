"""End-to-end tests for the envmerge command via click's CliRunner."""

import pytest
from click.testing import CliRunner

from envmerge.cli import cli
from envmerge.envfile import read_env_file


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _run(*args, input=None):
    return CliRunner().invoke(cli, list(args), input=input)


def _backups(directory):
    return sorted(p for p in directory.iterdir() if p.name.startswith(".env-backup-envmerge-"))


# --- argument handling ---

class TestArguments:
    def test_requires_source_and_destination(self, workdir):
        (workdir / ".env").write_text("A=1")
        result = _run(".env")
        assert result.exit_code == 2
        assert "At least one source and one destination" in result.output

    def test_missing_source(self, workdir):
        result = _run("missing.env", ".env")
        assert result.exit_code == 1
        assert "Source file not found: missing.env" in result.output
        assert not (workdir / ".env").exists()

    def test_invalid_strategy(self, workdir):
        (workdir / "a.env").write_text("A=1")
        result = _run("-s", "merge", "a.env", ".env")
        assert result.exit_code == 2

    def test_bad_config(self, workdir):
        (workdir / "envmerge.toml").write_text('[envmerge]\nstrategy = "merge"\n')
        (workdir / "a.env").write_text("A=1")
        result = _run("a.env", ".env")
        assert result.exit_code == 1
        assert "Invalid strategy" in result.output


# --- merging ---

class TestMerge:
    def test_merge_into_new_destination(self, workdir):
        (workdir / "a.env").write_text("KEY1=value1\nKEY2=value2")
        result = _run("a.env", ".env")
        assert result.exit_code == 0, result.output
        assert "No conflicts detected." in result.output
        assert "Successfully merged 1 file(s) into .env" in result.output
        assert (workdir / ".env").read_text() == "KEY1=value1\nKEY2=value2"
        assert _backups(workdir) == []

    def test_multiple_sources_later_wins(self, workdir):
        (workdir / "1.env").write_text("KEY1=source1_value1\nKEY2=source1_value2")
        (workdir / "2.env").write_text("KEY2=source2_value2\nKEY3=source2_value3")
        (workdir / ".env").write_text("KEY4=dest_value4")
        result = _run("--no-backup", "1.env", "2.env", ".env")
        assert result.exit_code == 0, result.output
        assert read_env_file(workdir / ".env").as_dict() == {
            "KEY1": "source1_value1",
            "KEY2": "source2_value2",
            "KEY3": "source2_value3",
            "KEY4": "dest_value4",
        }
        assert "Successfully merged 2 file(s) into .env" in result.output

    def test_preserves_comments(self, workdir):
        (workdir / "a.env").write_text("# Source comment\nKEY1=value1\n\nKEY2=value2")
        (workdir / ".env").write_text("# Destination comment\nKEY3=value3")
        result = _run("--no-backup", "a.env", ".env")
        assert result.exit_code == 0, result.output
        content = (workdir / ".env").read_text()
        for expected in ("# Destination comment", "# Source comment", "KEY1=value1", "KEY2=value2", "KEY3=value3"):
            assert expected in content

    def test_quoted_values(self, workdir):
        (workdir / "a.env").write_text('KEY1="value with spaces"\nKEY2=simple')
        (workdir / ".env").write_text("KEY3=existing")
        result = _run("--no-backup", "a.env", ".env")
        assert result.exit_code == 0, result.output
        assert read_env_file(workdir / ".env").as_dict() == {
            "KEY1": "value with spaces",
            "KEY2": "simple",
            "KEY3": "existing",
        }

    def test_dry_run_writes_nothing(self, workdir):
        (workdir / "a.env").write_text("A=1")
        (workdir / ".env").write_text("B=2")
        result = _run("--dry-run", "a.env", ".env")
        assert result.exit_code == 0, result.output
        assert "A=1\nB=2" in result.output
        assert (workdir / ".env").read_text() == "B=2"
        assert _backups(workdir) == []

    def test_destination_with_invalid_utf8(self, workdir):
        (workdir / "a.env").write_text("A=1")
        (workdir / ".env").write_bytes(b"B=\xff\xfe\n")
        result = _run("-s", "overwrite", "a.env", ".env")
        assert result.exit_code == 0, result.output
        assert result.exception is None
        assert read_env_file(workdir / ".env").keys() == ["A", "B"]
        backups = _backups(workdir)
        assert len(backups) == 1
        assert backups[0].read_bytes() == b"B=\xff\xfe\n"


# --- conflict strategies ---

class TestStrategies:
    @pytest.fixture
    def files(self, workdir):
        (workdir / "a.env").write_text("KEY1=a\nKEY2=b")
        (workdir / ".env").write_text("KEY2=old\nKEY3=c")
        return workdir

    def test_overwrite(self, files):
        result = _run("--no-backup", "-s", "overwrite", "a.env", ".env")
        assert result.exit_code == 0, result.output
        assert (files / ".env").read_text() == "KEY1=a\nKEY2=b\nKEY3=c"
        assert "Resolved 1 conflict(s)" in result.output

    def test_keep(self, files):
        result = _run("--no-backup", "--strategy", "keep", "a.env", ".env")
        assert result.exit_code == 0, result.output
        assert (files / ".env").read_text() == "KEY1=a\nKEY2=old\nKEY3=c"

    def test_interactive_keep(self, files):
        result = _run("--no-backup", "a.env", ".env", input="keep\n")
        assert result.exit_code == 0, result.output
        assert "Conflict for key" in result.output
        assert "KEY2" in result.output
        assert (files / ".env").read_text() == "KEY1=a\nKEY2=old\nKEY3=c"

    def test_interactive_overwrite(self, files):
        result = _run("--no-backup", "a.env", ".env", input="overwrite\n")
        assert result.exit_code == 0, result.output
        assert (files / ".env").read_text() == "KEY1=a\nKEY2=b\nKEY3=c"

    def test_interactive_cancelled(self, files):
        result = _run("a.env", ".env", input="")
        assert result.exit_code == 1
        assert "Operation cancelled by user" in result.output
        assert (files / ".env").read_text() == "KEY2=old\nKEY3=c"
        assert _backups(files) == []

    def test_strategy_from_config(self, files):
        (files / "envmerge.toml").write_text('[envmerge]\nstrategy = "overwrite"\nbackup = false\n')
        result = _run("a.env", ".env")
        assert result.exit_code == 0, result.output
        assert (files / ".env").read_text() == "KEY1=a\nKEY2=b\nKEY3=c"
        assert _backups(files) == []

    def test_option_overrides_config(self, files):
        (files / "envmerge.toml").write_text('[envmerge]\nstrategy = "overwrite"\n')
        result = _run("--no-backup", "-s", "keep", "a.env", ".env")
        assert result.exit_code == 0, result.output
        assert "KEY2=old" in (files / ".env").read_text()


# --- backups ---

class TestBackups:
    def test_backup_kept_when_destination_changes(self, workdir):
        (workdir / "a.env").write_text("B=2")
        (workdir / ".env").write_text("A=1")
        result = _run("a.env", ".env")
        assert result.exit_code == 0, result.output
        backups = _backups(workdir)
        assert len(backups) == 1
        assert backups[0].read_text() == "A=1"
        assert "Created backup:" in result.output
        assert (workdir / ".env").read_text() == "B=2\nA=1"

    def test_redundant_backup_removed(self, workdir):
        (workdir / "a.env").write_text("A=1")
        (workdir / ".env").write_text("A=1")
        result = _run("a.env", ".env")
        assert result.exit_code == 0, result.output
        assert "Removed redundant backup" in result.output
        assert _backups(workdir) == []

    def test_no_backup_flag(self, workdir):
        (workdir / "a.env").write_text("B=2")
        (workdir / ".env").write_text("A=1")
        result = _run("--no-backup", "a.env", ".env")
        assert result.exit_code == 0, result.output
        assert _backups(workdir) == []
