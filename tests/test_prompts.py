import io

import pytest

from agentstart.prompts import PromptHelper


def make(text):
    out = io.StringIO()
    return PromptHelper(io.StringIO(text), out), out


def test_ask_trims_answer_and_shows_question():
    prompter, out = make("  hello world  \n")
    assert prompter.ask("Q? ") == "hello world"
    assert out.getvalue() == "Q? "


def test_ask_raises_on_empty_input():
    prompter, _ = make("")
    with pytest.raises(EOFError):
        prompter.ask("Q? ")


def test_ask_raises_on_unterminated_last_line():
    prompter, _ = make("partial")
    with pytest.raises(EOFError):
        prompter.ask("Q? ")


def test_ask_with_default_uses_default_on_empty():
    prompter, out = make("\n")
    assert prompter.ask_with_default("Shell", "bash") == "bash"
    assert out.getvalue() == "Shell [bash]: "


def test_ask_with_default_keeps_given_value():
    prompter, _ = make("zsh\n")
    assert prompter.ask_with_default("Shell", "bash") == "zsh"


@pytest.mark.parametrize(
    "answer, default_yes, expected",
    [
        ("y", False, True),
        ("YES", False, True),
        ("", True, True),
        ("", False, False),
        ("no", True, False),
        ("maybe", True, False),
    ],
)
def test_ask_yes_no(answer, default_yes, expected):
    prompter, _ = make(answer + "\n")
    assert prompter.ask_yes_no("Continue?", default_yes) is expected


@pytest.mark.parametrize("default_yes, hint", [(True, "[Y/n]"), (False, "[y/N]")])
def test_ask_yes_no_hint(default_yes, hint):
    prompter, out = make("\n")
    prompter.ask_yes_no("Continue?", default_yes)
    assert out.getvalue() == f"Continue? {hint}: "


def test_ask_choice_retries_until_valid():
    prompter, out = make("5\nabc\n2\n")
    options = ["global", "local", "both"]
    assert prompter.ask_choice("Pick:", options) == "local"
    text = out.getvalue()
    assert text.startswith("Pick:\n  1) global\n  2) local\n  3) both\n\n")
    assert text.count("Invalid choice. Please enter 1-3: ") == 2


def test_ask_choice_eof_raises():
    prompter, _ = make("9\n")
    with pytest.raises(EOFError):
        prompter.ask_choice("Pick:", ["a", "b"])


@pytest.mark.parametrize("name", ["claude", "gpt-4", "my-agent"])
def test_validate_name_accepts(name):
    prompter, _ = make("")
    assert prompter.validate_name(name) is None


@pytest.mark.parametrize("name", ["Bad", "a--b", "-a", "a-", "under_score", "with space"])
def test_validate_name_rejects(name):
    prompter, _ = make("")
    with pytest.raises(ValueError, match="invalid name"):
        prompter.validate_name(name)


def test_validate_name_empty():
    prompter, _ = make("")
    with pytest.raises(ValueError, match="name cannot be empty"):
        prompter.validate_name("")


def test_ask_validated_name_loops_on_invalid():
    prompter, out = make("Bad Name\ngood-name\n")
    assert prompter.ask_validated_name("Name: ") == "good-name"
    assert "✗ invalid name" in out.getvalue()


def test_ask_optional_prompt_and_empty_answer():
    prompter, out = make("\n")
    assert prompter.ask_optional("Description") == ""
    assert out.getvalue() == "Description (optional): "


def test_print_header():
    prompter, out = make("")
    prompter.print_header("Title")
    assert out.getvalue() == "\nTitle\n" + "─" * 60 + "\n\n"


def test_print_markers():
    prompter, out = make("")
    prompter.print_success("ok")
    prompter.print_error("bad")
    prompter.print_warning("hmm")
    assert out.getvalue().splitlines() == ["✓ ok", "✗ bad", "⚠ hmm"]