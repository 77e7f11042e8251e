import json

import pytest

from schemasync import __version__, cli


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(f'paths:\n  log_file: "{(tmp_path / "schemasync.log").as_posix()}"\n')
    return path


@pytest.fixture
def project_file(tmp_path):
    path = tmp_path / "project.json"
    path.write_text(json.dumps({
        "schema": {"code": "type Query {\n  _empty: String\n}\n", "libraries": ""},
        "blocks": [{"id": "b1", "title": "Checkout", "kind": "event"}],
    }))
    return path


def run(argv):
    with pytest.raises(SystemExit) as exit_info:
        cli.main(argv)
    return exit_info.value.code


def test_check_reports_drift(config_file, project_file, capsys):
    """Test that check exits non-zero when the schema is out of date."""
    assert run(["--config", str(config_file), "check", str(project_file)]) == 1
    assert "add     Checkout (event block b1)" in capsys.readouterr().out


def test_sync_writes_project(config_file, project_file, tmp_path):
    """Test that sync writes the updated schema back to the project file."""
    output = tmp_path / "synced.json"

    assert run(["--config", str(config_file), "sync", str(project_file), "-o", str(output)]) == 0

    payload = json.loads(output.read_text())
    assert "type Checkout @eventModelingBlock(" in payload["schema"]["code"]
    assert payload["blocks"] == [{"id": "b1", "title": "Checkout", "kind": "event"}]

    assert run(["--config", str(config_file), "check", str(output)]) == 0


def test_sync_prints_schema(config_file, project_file, capsys):
    """Test that sync prints the schema when no output path is given."""
    assert run(["--config", str(config_file), "sync", str(project_file)]) == 0
    assert "type Checkout @eventModelingBlock(" in capsys.readouterr().out


def test_invalid_schema_exits_with_error(config_file, tmp_path, capsys):
    """Test that an unparseable schema exits with an error code."""
    project = tmp_path / "broken.json"
    project.write_text(json.dumps({"schema": {"code": "type Query {"}, "blocks": []}))

    assert run(["--config", str(config_file), "check", str(project)]) == 2
    assert "does not parse" in capsys.readouterr().err


def test_missing_project_file(config_file, tmp_path):
    """Test that a missing project file exits with an error code."""
    assert run(["--config", str(config_file), "check", str(tmp_path / "missing.json")]) == 2


def test_version_flag(capsys):
    """Test that --version prints the package version."""
    assert run(["--version"]) == 0
    assert capsys.readouterr().out.strip() == f"schemasync {__version__}"
