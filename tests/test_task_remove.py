import io
import os

import pytest

from agentstart.backup import BackupHelper
from agentstart.filesystem import LocalFileSystem
from agentstart.loader import Loader
from agentstart.models import Task
from agentstart.prompts import PromptHelper
from agentstart.task_remove import TaskRemoveError, remove_task_from_scope, run_task_remove
from agentstart.toml_store import TomlHelper


@pytest.fixture
def env(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    work = tmp_path / "work"
    work.mkdir()
    return {
        "work": str(work),
        "global": str(home / ".config" / "start"),
        "local": str(work / ".start"),
        "helper": TomlHelper(LocalFileSystem()),
        "loader": Loader(LocalFileSystem()),
    }


def _prompter(text):
    return PromptHelper(io.StringIO(text), io.StringIO())


def _tasks():
    return {
        "review": Task(alias="cr", description="Review code changes", prompt="Review {instructions}"),
        "help": Task(prompt="Help with: {instructions}"),
    }


def _backups(directory):
    return [n for n in os.listdir(directory) if n.startswith("tasks.") and n != "tasks.toml"]


def test_remove_from_local_only(env):
    env["helper"].write_tasks(env["local"], _tasks())
    prompter = _prompter("y\n")
    removed = run_task_remove(env["loader"], prompter, "review", env["work"], local_only=True)
    assert removed == ["local"]
    remaining = env["helper"].read_tasks(env["local"])
    assert set(remaining) == {"help"}
    assert len(_backups(env["local"])) == 1
    output = prompter.output.getvalue()
    assert "Task: review (alias: cr)" in output
    assert "Description: Review code changes" in output
    assert "Task 'review' removed successfully" in output


def test_declined_removal_changes_nothing(env):
    env["helper"].write_tasks(env["global"], _tasks())
    prompter = _prompter("n\n")
    assert run_task_remove(env["loader"], prompter, "review", env["work"]) == []
    assert set(env["helper"].read_tasks(env["global"])) == {"review", "help"}
    assert _backups(env["global"]) == []
    assert "Task 'review' not removed." in prompter.output.getvalue()


def test_remove_from_global_when_only_global_has_it(env):
    env["helper"].write_tasks(env["global"], _tasks())
    env["helper"].write_tasks(env["local"], {"other": Task(prompt="x")})
    removed = run_task_remove(env["loader"], _prompter("y\n"), "help", env["work"])
    assert removed == ["global"]
    assert set(env["helper"].read_tasks(env["global"])) == {"review"}
    assert set(env["helper"].read_tasks(env["local"])) == {"other"}


def test_remove_from_both_scopes(env):
    env["helper"].write_tasks(env["global"], _tasks())
    env["helper"].write_tasks(env["local"], _tasks())
    prompter = _prompter("3\ny\ny\n")
    removed = run_task_remove(env["loader"], prompter, "review", env["work"])
    assert removed == ["global", "local"]
    assert "review" not in env["helper"].read_tasks(env["global"])
    assert "review" not in env["helper"].read_tasks(env["local"])
    assert "Task exists in both global and local configs." in prompter.output.getvalue()


def test_choose_local_when_in_both(env):
    env["helper"].write_tasks(env["global"], _tasks())
    env["helper"].write_tasks(env["local"], _tasks())
    removed = run_task_remove(env["loader"], _prompter("2\ny\n"), "help", env["work"])
    assert removed == ["local"]
    assert "help" in env["helper"].read_tasks(env["global"])
    assert "help" not in env["helper"].read_tasks(env["local"])


def test_missing_everywhere_raises(env):
    prompter = _prompter("")
    with pytest.raises(TaskRemoveError, match="task not found"):
        run_task_remove(env["loader"], prompter, "review", env["work"])
    assert "Error: Task 'review' not found in configuration." in prompter.output.getvalue()


def test_local_only_missing_task_raises(env):
    with pytest.raises(TaskRemoveError, match="not found in local config"):
        run_task_remove(env["loader"], _prompter(""), "review", env["work"], local_only=True)


def test_remove_task_from_scope_mutates_and_writes(env):
    helper = env["helper"]
    helper.write_tasks(env["global"], _tasks())
    tasks = helper.read_tasks(env["global"])
    removed = remove_task_from_scope(
        "help", env["global"], "global", tasks, _prompter("yes\n"), helper,
        BackupHelper(LocalFileSystem()),
    )
    assert removed is True
    assert "help" not in tasks
    assert set(helper.read_tasks(env["global"])) == set(tasks)


def test_remove_task_from_scope_unknown_task(env):
    with pytest.raises(TaskRemoveError, match="not found in global config"):
        remove_task_from_scope(
            "missing", env["global"], "global", {}, _prompter(""), env["helper"],
            BackupHelper(LocalFileSystem()),
        )