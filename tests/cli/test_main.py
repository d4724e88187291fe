import sys
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from signedurl.cli.main import main
from signedurl.url_signer import sign, sign_with_expiration

KEY = "cli-secret"


def run_cli(*args: str) -> None:
    with patch.object(sys, "argv", ["signedurl", *args]):
        main()


def test_no_command(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run_cli()
    assert exc_info.value.code == 1
    assert "usage: signedurl" in capsys.readouterr().out


def test_sign_and_verify(capsys: pytest.CaptureFixture[str]) -> None:
    run_cli("sign", "https://example.com/files/a.txt?b=2&a=1", "--key", KEY)
    signed_url = capsys.readouterr().out.strip()
    assert signed_url == sign("https://example.com/files/a.txt?a=1&b=2", KEY.encode())

    run_cli("verify", signed_url, "--key", KEY)
    assert capsys.readouterr().out.strip() == "valid"


def test_sign_with_expiration(capsys: pytest.CaptureFixture[str]) -> None:
    run_cli("sign", "https://example.com/", "--key", KEY, "--expires-in", "60")
    signed_url = capsys.readouterr().out.strip()
    assert "expires=" in signed_url

    run_cli("verify", signed_url, "--key", KEY)
    assert capsys.readouterr().out.strip() == "valid"


def test_sign_relative_url(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run_cli("sign", "/relative?x=1", "--key", KEY)
    assert exc_info.value.code == 1
    assert capsys.readouterr().out.startswith("Error:")


def test_sign_already_signed(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run_cli("sign", "https://example.com/?signature=abc", "--key", KEY)
    assert exc_info.value.code == 1
    assert "reserved" in capsys.readouterr().out


def test_verify_invalid(capsys: pytest.CaptureFixture[str]) -> None:
    signed_url = sign("https://example.com/a", KEY.encode())
    with pytest.raises(SystemExit) as exc_info:
        run_cli("verify", signed_url.replace("/a?", "/b?"), "--key", KEY)
    assert exc_info.value.code == 1
    assert capsys.readouterr().out.strip() == "invalid"


def test_verify_expired(capsys: pytest.CaptureFixture[str]) -> None:
    signed_url = sign_with_expiration("https://example.com/", 1000, KEY.encode())
    with pytest.raises(SystemExit) as exc_info:
        run_cli("verify", signed_url, "--key", KEY)
    assert exc_info.value.code == 1
    assert capsys.readouterr().out.strip() == "expired"


def test_verify_relative_url(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run_cli("verify", "/a?signature=abc", "--key", KEY)
    assert exc_info.value.code == 1
    assert capsys.readouterr().out.startswith("Error:")


def test_key_from_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test signing with the key and default expiration from config.yaml."""
    with open(tmp_path / "config.yaml", "w") as f:
        yaml.safe_dump({"secret_key": KEY, "default_expiration": 60}, f)

    run_cli("sign", "https://example.com/", "--config-dir", str(tmp_path))
    signed_url = capsys.readouterr().out.strip()
    assert "expires=" in signed_url

    run_cli("verify", signed_url, "--key", KEY)
    assert capsys.readouterr().out.strip() == "valid"

    run_cli("verify", signed_url, "--config-dir", str(tmp_path))
    assert capsys.readouterr().out.strip() == "valid"


def test_serve(tmp_path: Path) -> None:
    with patch("signedurl.server.app.web.run_app") as mock_run_app:
        run_cli("serve", "--config-dir", str(tmp_path))

    mock_run_app.assert_called_once()
    assert mock_run_app.call_args.kwargs == {"host": "0.0.0.0", "port": 8080}


def test_sign_expiration_out_of_range(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run_cli(
            "sign", "https://example.com/", "--key", KEY, "--expires-in", str(10**15)
        )
    assert exc_info.value.code == 1
    assert capsys.readouterr().out.startswith("Error: --expires-in out of range")
