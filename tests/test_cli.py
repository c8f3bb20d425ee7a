# tests/test_cli.py
import os

import pytest
from typer.testing import CliRunner

from promptsync import __version__
from promptsync.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(mocker):
    mocker.patch("promptsync.cli.setup_logging")


def test_render_directory_to_stdout(project_dir):
    result = runner.invoke(app, ["render", str(project_dir), "--task", "Fix", "-i", "make it faster"])
    assert result.exit_code == 0, result.output
    out = result.stdout
    assert out.startswith("You are tasked to fix a bug. Instructions are as follows:\n\nmake it faster\n\n")
    order = [e.name for e in os.scandir(project_dir)]
    assert out.index(f"File: {order[0]}\n") < out.index(f"File: {order[1]}\n")
    assert "File: a.py\n```\nprint(1)```\n\n" in out


def test_render_to_file(project_dir, tmp_path):
    target = tmp_path / "out" / "prompt.txt"
    result = runner.invoke(app, ["render", str(project_dir / "b.py"), "-t", "Question", "-o", str(target)])
    assert result.exit_code == 0, result.output
    text = target.read_text(encoding="utf-8")
    assert text.startswith("You are tasked to answer a question:\n\n\n\n")
    assert text.endswith("Code Context:\nFile: b.py\n```\nprint(2)```\n\n")


def test_unknown_task_falls_back_to_feature(project_dir):
    result = runner.invoke(app, ["render", str(project_dir / "a.py"), "--task", "Limerick"])
    assert result.exit_code == 0
    assert result.stdout.startswith("You are tasked to implement a feature.")


def test_instruction_file(project_dir, tmp_path):
    instructions = tmp_path / "ask.txt"
    instructions.write_text("explain this", encoding="utf-8")
    result = runner.invoke(app, ["render", str(project_dir / "a.py"), "-t", "Others", "--instruction-file", str(instructions)])
    assert result.exit_code == 0
    assert result.stdout.startswith("\n\nexplain this\n\n")


def test_no_readable_files_exits_with_error(tmp_path):
    (tmp_path / "blob.bin").write_bytes(b"\xff\xfe\xfa\x00")
    result = runner.invoke(app, ["render", str(tmp_path)])
    assert result.exit_code == 1


def test_missing_path_is_rejected(tmp_path):
    result = runner.invoke(app, ["render", str(tmp_path / "missing")])
    assert result.exit_code != 0


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_watch_exits_when_watching_fails(project_dir, tmp_path, mocker):
    mocker.patch("promptsync.core.watcher.FileWatcher._next_event", side_effect=RuntimeError("stream closed"))
    target = tmp_path / "live_prompt.txt"
    result = runner.invoke(app, ["watch", str(project_dir), "-o", str(target), "-t", "Fix"])
    assert result.exit_code == 1
    assert target.read_text(encoding="utf-8").startswith("You are tasked to fix a bug.")
