# agentstart

A library for the configuration of an AI agent orchestrator. Agents, roles,
contexts and tasks are kept in TOML files in two layers:

- a global directory, `~/.config/start/`, shared by all projects;
- a local directory, `<work_dir>/.start/`, belonging to one project.

Each layer may hold `config.toml` (the `[settings]` table), `agents.toml`,
`roles.toml`, `contexts.toml` and `tasks.toml`. A missing file counts as
empty; a file that exists but does not parse, or holds a value of the wrong
type, raises `ConfigLoadError` (from the loader) or `TomlFileError` (from
`TomlHelper`).

Requires Python 3.11 or later. Install with `pip install .`; the tests need
the `test` extra (`pip install .[test]`).

## Data model

`agentstart.models` holds plain dataclasses: `Settings`, `Agent`, `Role`,
`Context`, `Task`, `AssetMeta`, `CachedAsset` and `Config`. A `Config` has
`settings`, `agents`, `roles`, `contexts`, `context_order` (the order the
contexts were defined in) and `tasks`. The `name` of each agent, role,
context and task is its table key in the TOML file.

## Loading, merging and validating

```python
from agentstart.filesystem import LocalFileSystem
from agentstart.loader import Loader
from agentstart.merge import merge
from agentstart.validator import Validator, ValidationErrors

loader = Loader(LocalFileSystem())
global_cfg = loader.load_global()
local_cfg = loader.load_local(".")

cfg = merge(global_cfg, local_cfg)

try:
    Validator().validate(cfg)
except ValidationErrors as errors:
    for issue in errors.issues:
        print(issue.field, issue.message)
```

`merge` returns a new `Config`. Local settings override global ones field by
field where the local value is set (`asset_download` always takes the local
value); local agents, roles and tasks replace global ones of the same name;
contexts keep their definition order, global contexts first and local-only
ones after them.

`Validator.validate` raises `ValidationErrors`, which carries a list of
`ValidationIssue(field, message)`, when it finds any of these:

- a name (of an agent, model, role, context, task or task alias) that is not
  lowercase alphanumeric words joined by hyphens (`claude`, `gpt-4`,
  `my-agent`); `is_valid_name` applies the same rule;
- an agent without `bin` or `command`, whose command lacks the `{bin}` or
  `{model}` placeholder, with no models, or whose `default_model` is not
  among its models;
- a role, context or task with none of `file`, `command` or `prompt`;
- a task, `default_agent` or `default_role` that names an agent or role that
  does not exist;
- a `log_level` other than `quiet`, `normal`, `verbose` or `debug`.

## File access

All reading and writing goes through the `FileSystem` protocol of
`agentstart.filesystem` (`read_file`, `write_file`, `exists`, `glob`,
`mkdir_all`, `temp_file`, `remove`). `LocalFileSystem` implements it on the
real disk; tests can pass an in-memory object with the same methods.

## Editing configuration files

`TomlHelper` (in `agentstart.toml_store`) reads and writes the files of one
directory one at a time: `read_agents`/`write_agents`,
`read_settings`/`write_settings`, `read_roles`/`write_roles`,
`read_contexts`/`write_contexts` and `read_tasks`/`write_tasks`. Writing
creates the directory if needed. `global_dir()`, `local_dir(work_dir)` and
`config_path(directory)` give the usual locations.

`BackupHelper.create_backup(path)` copies a file next to itself as
`<name>.YYYY-MM-DD-HHMMSS.toml` and returns the copy's path; it raises
`BackupError` if the file does not exist.

```python
from agentstart.backup import BackupHelper
from agentstart.filesystem import LocalFileSystem
from agentstart.toml_store import TomlHelper

fs = LocalFileSystem()
store = TomlHelper(fs)
directory = store.local_dir(".")

tasks = store.read_tasks(directory)
tasks["quick-help"].description = "Answer a quick question"
BackupHelper(fs).create_backup(f"{directory}/tasks.toml")
store.write_tasks(directory, tasks)
```

## Interactive workflows

`PromptHelper` (in `agentstart.prompts`) asks questions on a text stream
(standard input and output unless others are given): `ask`,
`ask_with_default`, `ask_yes_no`, `ask_choice` (numbered options),
`validate_name`, `ask_validated_name` and `ask_optional`, plus
`print_header`, `print_success`, `print_error` and `print_warning`. `ask`
raises `EOFError` when the input ends.

The workflow functions build on it:

- `agentstart.init_wizard.run_init(fetch_assets, local, force, prompter, home)`
  writes a starter configuration. `fetch_assets` is a callable that is given
  the catalog repository name (from the `ASSET_REPO` environment variable,
  or `grantcarthew/start`) and returns a list of `AssetMeta`; the assets of
  type `agents` whose binary is found on `PATH` are configured. The default
  agent is `claude`, then `gemini`, then the first one found
  (`select_default_agent`). Existing files are backed up first
  (`backup_config`). `write_config_files` writes the five files directly.
- `agentstart.task_config` has `list_tasks`, `show_task` and `test_task`,
  which print tasks from the merged (or local only) configuration;
  `test_task` checks the task's file, shell and prompt placeholders and
  raises `TaskConfigError` on errors. `task_source_type` describes which of
  file, command and prompt a task uses.
- `agentstart.task_new.run_task_new` asks for a new task's details, backs up
  `tasks.toml`, saves the task and returns it.
- `agentstart.task_remove.run_task_remove` and
  `agentstart.role_remove.run_role_remove` remove a task or role from the
  global or local layer (asking which when both have it), after confirmation
  and a backup.

Messages printed by these workflows mention commands such as
`start config task list`; those belong to the surrounding application and
are not provided by this package.

## What this package does not do

- It installs no command-line program; the workflows are functions to call
  from your own entry point.
- It does not launch agents, assemble prompts or run context and task
  commands; it only reads, writes, checks and reports configuration.
- It does not download anything: the asset catalog is whatever the
  `fetch_assets` callable given to `run_init` returns.
- There are no workflows for creating or editing roles, editing tasks, or
  editing agents and contexts; use `TomlHelper` for those.