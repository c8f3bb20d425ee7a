# tests/core/test_session.py
import os
import time

from promptsync.config.schema import AppConfig
from promptsync.core.models import MatchMode, TaskType
from promptsync.core.prompt_renderer import OUTPUT_FORMAT_DIRECTIVES
from promptsync.core.session import PromptSession


def wait_until(predicate, timeout: float = 10.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return predicate()


def test_drop_directory_renders_fix_prompt(session, project_dir):
    session.set_task_type("Fix")
    session.instruction = "make it faster"
    added = session.drop([project_dir])
    assert len(added) == 2

    prompt = session.render()
    assert prompt.startswith("You are tasked to fix a bug. Instructions are as follows:\n\nmake it faster\n\n")
    for directive in OUTPUT_FORMAT_DIRECTIVES:
        assert directive + "\n" in prompt
    assert "Code Context:\n" in prompt

    listing = [e.name for e in os.scandir(project_dir)]
    blocks = {"a.py": "File: a.py\n```\nprint(1)```\n\n", "b.py": "File: b.py\n```\nprint(2)```\n\n"}
    expected_context = "Code Context:\n" + "".join(blocks[name] for name in listing)
    assert prompt.endswith(expected_context)


def test_modified_file_shows_up_in_next_render(session, project_dir, changed):
    event, _ = changed
    session.set_task_type("Fix")
    session.instruction = "make it faster"
    session.drop([project_dir])

    (project_dir / "a.py").write_text("print(3)", encoding="utf-8")
    assert wait_until(lambda: "File: a.py\n```\nprint(3)```\n\n" in session.render())
    assert event.wait(5.0)
    prompt = session.render()
    assert "File: b.py\n```\nprint(2)```\n\n" in prompt
    assert "print(1)" not in prompt


def test_drop_subscribes_each_directory(session, project_dir):
    (project_dir / "nested").mkdir()
    (project_dir / "nested" / "c.py").write_text("c")
    session.drop([project_dir])
    assert session.watcher.watched_directories == {project_dir.resolve(), (project_dir / "nested").resolve()}


def test_unreadable_file_is_not_added(session, tmp_path):
    (tmp_path / "ok.txt").write_text("ok")
    (tmp_path / "blob.bin").write_bytes(b"\xff\xfe\xfa\x00")
    added = session.drop([tmp_path / "ok.txt", tmp_path / "blob.bin"])
    assert [f.file_name for f in added] == ["ok.txt"]
    assert len(session.store) == 1


def test_missing_drop_path_is_skipped(session, tmp_path):
    assert session.drop([tmp_path / "nope"]) == []


def test_remove_at_rerenders_without_file(session, project_dir):
    session.drop([project_dir])
    first = session.files()[0].file_name
    assert session.remove_at(0)
    assert f"File: {first}\n" not in session.render()
    assert not session.remove_at(5)
    assert len(session.files()) == 1


def test_unknown_task_type_falls_back_to_feature(session):
    assert session.set_task_type("Poetry") is TaskType.FEATURE
    assert session.render().startswith("You are tasked to implement a feature.")


def test_session_uses_config(tmp_path):
    f = tmp_path / "latin.txt"
    f.write_bytes("déjà".encode("latin-1"))
    config = AppConfig(default_task_type="Blog", match_mode="name", read_encodings=["utf-8", "latin-1"])
    with PromptSession(config=config) as s:
        assert s.task_type is TaskType.BLOG
        assert s.watcher.match_mode is MatchMode.NAME
        s.drop([f])
        assert s.files()[0].content == "déjà"


def test_render_only_session_does_not_watch(project_dir):
    s = PromptSession(watch=False)
    s.start()
    s.drop([project_dir])
    assert not s.watcher.is_running
    assert s.watcher.watched_directories == set()
    s.stop()
