"""
Tests for the command-line interface.
"""

from pathlib import Path

import yaml
from click.testing import CliRunner

from recorder.cli import main
from recorder.config import RecorderConfig


def test_keys_lists_supported_keys():
    result = CliRunner().invoke(main, ["keys"])

    assert result.exit_code == 0
    assert "shift_l" in result.output
    assert " a " in result.output


def test_init_config_writes_defaults(tmp_path: Path):
    output = tmp_path / "recorder.yaml"

    result = CliRunner().invoke(main, ["init-config", "--output", str(output)])

    assert result.exit_code == 0
    assert RecorderConfig.from_file(output) == RecorderConfig()


def test_init_config_refuses_to_overwrite(tmp_path: Path):
    output = tmp_path / "recorder.yaml"
    output.write_text("verbose: true\n")

    result = CliRunner().invoke(main, ["init-config", "--output", str(output)])

    assert result.exit_code == 1
    assert output.read_text() == "verbose: true\n"


def test_run_rejects_invalid_config(tmp_path: Path):
    config = tmp_path / "bad.yaml"
    config.write_text(yaml.dump({"hotkeys": {"stop": "f1"}}))

    result = CliRunner().invoke(main, ["run", "--config", str(config)])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
