import base64

from click.testing import CliRunner

from sealctl import cli

KEY = "ayellowsubmarine"


def test_generate_key_has_full_entropy():
    runner = CliRunner()
    for size in ("16", "24", "32"):
        result = runner.invoke(cli, ["generate-key", "--size", size])
        assert result.exit_code == 0
        assert len(base64.urlsafe_b64decode(result.output.strip())) == int(size)


def test_generated_key_issues_tokens():
    runner = CliRunner()
    key = runner.invoke(cli, ["generate-key"]).output.strip()
    args = ["--key", key, "--key-encoding", "base64"]
    token = runner.invoke(cli, ["issue", "--identity", "woo", *args]).output.strip()
    assert len(token) == 44
    result = runner.invoke(cli, ["check", "--identity", "woo", "--token", token, *args])
    assert result.exit_code == 0


def test_bad_base64_key_is_usage_error():
    result = CliRunner().invoke(
        cli, ["issue", "--identity", "woo", "--key", "not base64!", "--key-encoding", "base64"]
    )
    assert result.exit_code == 2


def test_issue_and_check():
    runner = CliRunner()
    issued = runner.invoke(cli, ["issue", "--identity", "woo", "--key", KEY])
    assert issued.exit_code == 0
    token = issued.output.strip()
    assert len(token) == 44

    checked = runner.invoke(cli, ["check", "--identity", "woo", "--token", token, "--key", KEY])
    assert checked.exit_code == 0
    assert "valid" in checked.output


def test_check_rejects_other_identity():
    runner = CliRunner()
    token = runner.invoke(
        cli, ["issue", "--identity", "woo", "--key", KEY, "--algorithm", "hmac-sha256"]
    ).output.strip()
    assert len(token) == 28
    result = runner.invoke(
        cli,
        ["check", "--identity", "boo", "--token", token, "--key", KEY, "--algorithm", "hmac-sha256"],
    )
    assert result.exit_code == 1
    assert "INVALID" in result.output


def test_bad_key_is_usage_error():
    result = CliRunner().invoke(cli, ["issue", "--identity", "woo", "--key", "short"])
    assert result.exit_code == 2
    assert "128, 192, or 256 bits" in result.output


def test_info():
    result = CliRunner().invoke(cli, ["info", "--key", KEY, "--max-age", "30"])
    assert result.exit_code == 0
    assert "aes-gcm" in result.output
    assert "30s" in result.output
    assert "44 characters" in result.output
