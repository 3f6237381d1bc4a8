import os

import pytest

from agentstart import task_config
from agentstart.filesystem import LocalFileSystem
from agentstart.loader import Loader
from agentstart.models import Task
from agentstart.task_config import TaskConfigError, task_source_type
from agentstart.toml_store import TomlHelper


@pytest.fixture
def env(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    work = tmp_path / "work"
    work.mkdir()
    fs = LocalFileSystem()
    helper = TomlHelper(fs)
    global_dir = str(home / ".config" / "start")
    local_dir = str(work / ".start")
    return {
        "loader": Loader(fs),
        "helper": helper,
        "global": global_dir,
        "local": local_dir,
        "work": str(work),
    }


@pytest.mark.parametrize(
    "task, expected",
    [
        (Task(file="a", command="b", prompt="c"), "Combination (file + command + template)"),
        (Task(file="a", command="b"), "Combination (file + command)"),
        (Task(file="a", prompt="c"), "File-based"),
        (Task(command="b", prompt="c"), "Command-based"),
        (Task(file="a"), "File only"),
        (Task(command="b"), "Command only"),
        (Task(prompt="c"), "Inline prompt"),
        (Task(), "Invalid (no UTD fields)"),
    ],
)
def test_task_source_type(task, expected):
    assert task_source_type(task) == expected


def test_list_tasks_empty(env, capsys):
    scope, tasks = task_config.list_tasks(env["loader"], env["work"], False)
    assert tasks == {}
    assert scope == "merged"
    assert "No tasks configured." in capsys.readouterr().out


def test_list_tasks_merges_and_sorts(env, capsys):
    env["helper"].write_tasks(env["global"], {
        "zeta": Task(prompt="global zeta"),
        "alpha": Task(prompt="global alpha", alias="al"),
    })
    env["helper"].write_tasks(env["local"], {"alpha": Task(prompt="local alpha")})
    scope, tasks = task_config.list_tasks(env["loader"], env["work"], False)
    assert scope == "merged"
    assert list(tasks) == ["alpha", "zeta"]
    assert tasks["alpha"].prompt == "local alpha"
    out = capsys.readouterr().out
    assert "Configured tasks (merged):" in out
    assert out.index("alpha") < out.index("zeta")


def test_list_tasks_local_only(env):
    env["helper"].write_tasks(env["global"], {"g": Task(prompt="x")})
    env["helper"].write_tasks(env["local"], {"l": Task(prompt="y")})
    scope, tasks = task_config.list_tasks(env["loader"], env["work"], True)
    assert scope == "local"
    assert list(tasks) == ["l"]


def test_list_tasks_falls_back_to_global_on_bad_local(env):
    env["helper"].write_tasks(env["global"], {"g": Task(prompt="x")})
    os.makedirs(env["local"])
    with open(os.path.join(env["local"], "tasks.toml"), "w") as handle:
        handle.write("[tasks\nbroken")
    scope, tasks = task_config.list_tasks(env["loader"], env["work"], False)
    assert scope == "global"
    assert list(tasks) == ["g"]


def test_list_tasks_bad_global_raises(env):
    os.makedirs(env["global"])
    with open(os.path.join(env["global"], "config.toml"), "w") as handle:
        handle.write("[settings\nnot valid")
    with pytest.raises(TaskConfigError, match="failed to load global config"):
        task_config.list_tasks(env["loader"], env["work"], False)


def test_show_task_not_found(env, capsys):
    with pytest.raises(TaskConfigError, match="task not found"):
        task_config.show_task(env["loader"], env["work"], "missing", False)
    assert "No task 'missing' found" in capsys.readouterr().out


def test_show_task_reports_scope_and_file(env, capsys):
    with open(os.path.join(env["work"], "notes.md"), "w") as handle:
        handle.write("hello")
    env["helper"].write_tasks(env["global"], {"review": Task(prompt="g")})
    env["helper"].write_tasks(env["local"], {"review": Task(file="notes.md", prompt="local")})
    task = task_config.show_task(env["loader"], env["work"], "review", False)
    assert task.prompt == "local"
    out = capsys.readouterr().out
    assert "Task configuration: review (local)" in out
    assert "✓ File exists" in out


def test_show_task_truncates_long_prompt(env, capsys):
    prompt = "\n".join(f"line {i}" for i in range(25))
    env["helper"].write_tasks(env["global"], {"long": Task(prompt=prompt)})
    task_config.show_task(env["loader"], env["work"], "long", False)
    out = capsys.readouterr().out
    assert "  line 19" in out
    assert "  line 20" not in out
    assert "... (5 more lines)" in out


def test_test_task_clean(env, capsys):
    env["helper"].write_tasks(env["global"], {"help": Task(prompt="Help: {instructions}")})
    assert task_config.test_task(env["loader"], env["work"], "help") is True
    assert "✓ Task 'help' is configured correctly" in capsys.readouterr().out


def test_test_task_unknown_placeholder_warns(env, capsys):
    env["helper"].write_tasks(env["global"], {"odd": Task(prompt="{instructions} {bogus}")})
    assert task_config.test_task(env["loader"], env["work"], "odd") is False
    assert "Unknown placeholder {bogus}" in capsys.readouterr().out


def test_test_task_file_placeholder_without_file_warns(env):
    env["helper"].write_tasks(env["global"], {"f": Task(prompt="{instructions} {file_contents}")})
    assert task_config.test_task(env["loader"], env["work"], "f") is False


def test_test_task_missing_shell_is_error(env, capsys):
    env["helper"].write_tasks(env["global"], {
        "c": Task(command="echo hi", shell="no-such-shell-binary-xyz", prompt="{instructions}"),
    })
    with pytest.raises(TaskConfigError, match="configuration errors"):
        task_config.test_task(env["loader"], env["work"], "c")
    assert "✗ Shell not found: no-such-shell-binary-xyz" in capsys.readouterr().out


def test_test_task_no_fields_is_error(env):
    env["helper"].write_tasks(env["global"], {"empty": Task(description="nothing")})
    with pytest.raises(TaskConfigError, match="configuration errors"):
        task_config.test_task(env["loader"], env["work"], "empty")


def test_test_task_not_found(env, capsys):
    with pytest.raises(TaskConfigError, match="task not found"):
        task_config.test_task(env["loader"], env["work"], "ghost")
    assert "Task 'ghost' not found" in capsys.readouterr().err