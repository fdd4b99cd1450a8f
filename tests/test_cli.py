import json
import logging

import pytest
from click.testing import CliRunner

from passforge import __version__
from passforge.cli import cli
from shared.logger import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.addHandler(logging.NullHandler())
    root.setLevel(logging.NOTSET)


@pytest.fixture
def runner():
    return CliRunner()


def _json(runner, *args):
    result = runner.invoke(cli, ["-q", "-o", "json", *args], obj={})
    return result, (json.loads(result.stdout) if result.stdout.strip() else None)


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_quick_json(runner):
    result, report = _json(runner, "quick", "hunter22")
    assert result.exit_code == 0
    assert report["report_metadata"]["tool"] == "quick"
    assert report["metadata"]["quick"]["score"] == 50
    assert "hunter22" not in result.stdout


def test_generate_json(runner):
    result, report = _json(runner, "generate", "--count", "3", "--length", "24", "--no-symbols")
    assert result.exit_code == 0
    passwords = [p["password"] for p in report["metadata"]["passwords"]]
    assert len(passwords) == 3
    assert all(len(p) == 24 and p.isalnum() for p in passwords)


def test_generate_invalid_length_exits_nonzero(runner):
    result, report = _json(runner, "generate", "--length", "5")
    assert result.exit_code == 1
    assert "error" in report["metadata"]


def test_policy_json(runner):
    result, report = _json(runner, "policy", "short")
    assert result.exit_code == 0
    assert report["metadata"]["valid"] is False
    assert "normalized" not in report["metadata"]


def test_expiry_json(runner):
    result, report = _json(runner, "expiry", "Pass123", "--created", "2024-01-01", "--mfa")
    assert result.exit_code == 0
    assert report["metadata"]["rotation_period_days"] == 180


def test_hash_and_verify(runner):
    result, report = _json(runner, "hash", "s3cret!", "--memory", "8", "--iterations", "1")
    assert result.exit_code == 0
    encoded = report["metadata"]["encoded"]
    assert encoded.startswith("$argon2id$v=19$m=8,t=1,p=1$")

    ok, ok_report = _json(runner, "hash", "s3cret!", "--verify", encoded)
    assert ok.exit_code == 0
    assert ok_report["metadata"]["verified"] is True

    bad, bad_report = _json(runner, "hash", "wrong", "--verify", encoded)
    assert bad.exit_code == 1
    assert bad_report["metadata"]["verified"] is False


def test_output_file(runner, tmp_path):
    target = tmp_path / "report.json"
    result = runner.invoke(
        cli, ["-q", "-o", "json", "-f", str(target), "passphrase", "--words", "4"], obj={}
    )
    assert result.exit_code == 0
    report = json.loads(target.read_text(encoding="utf-8"))
    assert report["report_metadata"]["tool"] == "passphrase"


def test_console_passphrase(runner):
    result = runner.invoke(cli, ["passphrase", "--count", "2"], obj={})
    assert result.exit_code == 0
    assert "Generated Passphrases" in result.stdout


def test_config_file(runner, tmp_path):
    config = tmp_path / "passforge.toml"
    config.write_text("[generator]\nlength = 30\n", encoding="utf-8")
    result = runner.invoke(cli, ["-q", "-o", "json", "-c", str(config), "generate"], obj={})
    report = json.loads(result.stdout)
    assert len(report["metadata"]["passwords"][0]["password"]) == 30
