import io

import pytest

from chatapply import cli

EXISTING_JS = "function foo(){return 1}\nfunction bar(){return 2}"
REPLY = "app.js\n```js\nfunction foo(){return 99}\n```\n\nsrc/new.py\n```python\nprint('hi')\n```\n"


@pytest.fixture
def env(tmp_path):
    ws = tmp_path / "ws"
    ws.mkdir()
    (ws / ".gitignore").write_text("", encoding="utf-8")
    (ws / "app.js").write_text(EXISTING_JS, encoding="utf-8")
    reply = tmp_path / "reply.md"
    reply.write_text(REPLY, encoding="utf-8")
    return {"ws": ws, "reply": reply, "backups": tmp_path / "backups"}


def _run(env, *args):
    return cli.main(["--backup-dir", str(env["backups"]), *args])


def test_apply_from_file(env, capsys):
    code = _run(env, "apply", str(env["reply"]), "--base", str(env["ws"]), "--yes")
    assert code == 0
    assert (env["ws"] / "app.js").read_text(encoding="utf-8") == "function foo(){return 99}\nfunction bar(){return 2}"
    assert (env["ws"] / "src" / "new.py").read_text(encoding="utf-8") == "print('hi')"
    assert "2 file(s) created/updated successfully." in capsys.readouterr().out


def test_apply_prints_the_summary_once(env, capsys):
    _run(env, "apply", str(env["reply"]), "--base", str(env["ws"]), "--yes")
    out = capsys.readouterr().out
    assert out.count("file(s) created/updated successfully.") == 1
    assert "Updated app.js" in out
    assert "Created src/new.py" in out


def test_apply_from_stdin(env, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(REPLY))
    assert _run(env, "apply", "-", "--base", str(env["ws"]), "--yes", "--no-backup") == 0
    assert (env["ws"] / "src" / "new.py").exists()
    assert not env["backups"].exists()


def test_apply_dry_run(env, capsys):
    assert _run(env, "apply", str(env["reply"]), "--base", str(env["ws"]), "--yes", "--dry-run") == 0
    assert (env["ws"] / "app.js").read_text(encoding="utf-8") == EXISTING_JS
    assert "DRY RUN" in capsys.readouterr().out


def test_apply_reports_failures(env, tmp_path):
    (env["ws"] / "src").write_text("a file where a directory is needed", encoding="utf-8")
    assert _run(env, "apply", str(env["reply"]), "--base", str(env["ws"]), "--yes") == 1


def test_apply_asks_on_terminal(env, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt="": "c")
    assert _run(env, "apply", str(env["reply"]), "--base", str(env["ws"])) == 0
    assert (env["ws"] / "app.js").read_text(encoding="utf-8") == EXISTING_JS


def test_missing_input_file_is_a_usage_error(env, capsys):
    assert _run(env, "apply", str(env["ws"] / "missing.md")) == 2
    assert "Cannot read" in capsys.readouterr().err


def test_clipboard_and_file_conflict(env):
    assert _run(env, "apply", str(env["reply"]), "--clipboard") == 2


def test_clipboard_input(env, monkeypatch):
    monkeypatch.setattr(cli, "read_clipboard", lambda: REPLY)
    assert _run(env, "apply", "--clipboard", "--base", str(env["ws"]), "--yes") == 0
    assert (env["ws"] / "src" / "new.py").exists()


def test_missing_subcommand_exits_2():
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 2


def test_blocks_lists_classification(env, capsys):
    assert _run(env, "blocks", str(env["reply"])) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].strip().startswith("1. app.js  [js]  partial (few-functions)")
    assert "src/new.py" in out[1]


def test_history_and_revert(env, capsys):
    _run(env, "apply", str(env["reply"]), "--base", str(env["ws"]), "--yes")
    capsys.readouterr()

    assert _run(env, "history") == 0
    out = capsys.readouterr().out
    assert "app.js" in out
    assert "new.py" not in out

    assert _run(env, "revert") == 0
    assert (env["ws"] / "app.js").read_text(encoding="utf-8") == EXISTING_JS

    assert _run(env, "revert", "--entry", "5") == 2

    assert _run(env, "clear-history") == 0
    capsys.readouterr()
    assert _run(env, "history") == 0
    assert "No history yet." in capsys.readouterr().out
    assert _run(env, "revert") == 1


@pytest.mark.parametrize(
    "answers, expected",
    [
        (["Apply"], "Apply"),
        (["a"], "Apply"),
        (["CANCEL"], "Cancel"),
        (["maybe", "c"], "Cancel"),
        ([""], None),
    ],
)
def test_console_confirm(answers, expected):
    it = iter(answers)
    out = io.StringIO()
    assert cli.console_confirm("Apply changes?", ("Apply", "Cancel"), input_fn=lambda _p: next(it), out=out) == expected
    assert out.getvalue().startswith("Apply changes?\n")


def test_console_confirm_eof():
    def _eof(_prompt):
        raise EOFError

    assert cli.console_confirm("Overwrite?", ("Yes", "No"), input_fn=_eof, out=io.StringIO()) is None
