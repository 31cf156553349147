"""Tests for the deckhand command line."""

import json
import os

from click.testing import CliRunner

from deckhand.__main__ import main


def write_configuration(tmp_path, root):
    path = tmp_path / "deckhand.json"
    path.write_text(
        json.dumps(
            {
                "hosts": [
                    {
                        "hostname": "localhost",
                        "stage": "test",
                        "path": str(root),
                        "connectionType": "local",
                    }
                ],
                "events": {"subscribers": [{"class": "deckhand.tasks.DeployReleaseTask"}]},
            }
        )
    )
    return path


def test_deploy(tmp_path):
    root = tmp_path / "www"
    (root / "releases" / "1.0.0").mkdir(parents=True)
    config = write_configuration(tmp_path, root)

    result = CliRunner().invoke(main, ["deploy", "1.0.0", "test", "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert "localhost (test): success" in result.output
    assert os.readlink(root / "test") == f"{root}/releases/1.0.0"


def test_deploy_failure_exit_code(tmp_path):
    config = write_configuration(tmp_path, tmp_path / "www")

    result = CliRunner().invoke(main, ["deploy", "1.0.0", "test", "--config", str(config)])

    assert result.exit_code == 1
    assert "localhost (test): failed" in result.output


def test_missing_configuration(tmp_path):
    result = CliRunner().invoke(
        main, ["deploy", "1.0.0", "test", "--config", str(tmp_path / "missing.json")]
    )

    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_invalid_stage():
    result = CliRunner().invoke(main, ["deploy", "1.0.0", "staging"])
    assert result.exit_code == 2


def test_configuration_from_environment(tmp_path):
    root = tmp_path / "www"
    (root / "releases" / "1.0.0").mkdir(parents=True)
    config = write_configuration(tmp_path, root)

    result = CliRunner().invoke(
        main, ["deploy", "1.0.0", "test"], env={"DECKHAND_CONFIG_FILE": str(config)}
    )

    assert result.exit_code == 0, result.output
