from unittest.mock import Mock

import pytest

from cli.app import main as cli_main
from common.embed.errors import NotHtmlEmail


def test_no_eligible_files_exits_non_zero(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    run_batch = Mock()
    monkeypatch.setattr(cli_main, "run_batch", run_batch)

    assert cli_main.main([]) == 1

    err = capsys.readouterr().err
    assert "no .eml given" in err
    assert "usage: embed-email" in err
    run_batch.assert_not_called()


def test_discovers_files_when_no_arguments(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.eml").write_bytes(b"")
    (tmp_path / "a.embed.eml").write_bytes(b"")
    run_batch = Mock(return_value=[])
    monkeypatch.setattr(cli_main, "run_batch", run_batch)

    assert cli_main.main(["-v"]) == 0

    (paths,), _ = run_batch.call_args
    assert [p.name for p in paths] == ["a.eml"]


def test_explicit_files_are_passed_through(monkeypatch):
    run_batch = Mock(return_value=[])
    monkeypatch.setattr(cli_main, "run_batch", run_batch)

    assert cli_main.main(["one.eml", "two.eml"]) == 0

    (paths,), _ = run_batch.call_args
    assert [str(p) for p in paths] == ["one.eml", "two.eml"]


def test_fatal_error_prints_message(monkeypatch, capsys):
    monkeypatch.setattr(cli_main, "run_batch", Mock(side_effect=NotHtmlEmail("x.eml: email has no HTML body")))

    assert cli_main.main(["x.eml"]) == 1
    assert "x.eml: email has no HTML body" in capsys.readouterr().err


def test_unknown_option_is_usage_error():
    with pytest.raises(SystemExit) as exc_info:
        cli_main.main(["--nope"])
    assert exc_info.value.code == 2
