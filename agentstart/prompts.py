"""Interactive prompts for the command-line wizards."""

from __future__ import annotations

import re
import sys
from typing import TextIO

from .validator import is_valid_name

_LEADING_INT = re.compile(r"[+-]?\d+")


class PromptHelper:
    """Asks questions on a text stream and reads the answers line by line."""

    def __init__(self, input_stream: TextIO | None = None, output_stream: TextIO | None = None):
        self.input = input_stream if input_stream is not None else sys.stdin
        self.output = output_stream if output_stream is not None else sys.stdout

    def _write(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()

    def ask(self, question: str) -> str:
        """Show ``question`` and return the trimmed answer.

        Raises ``EOFError`` when the input ends before a full line is read.
        """
        self._write(question)
        line = self.input.readline()
        if not line.endswith("\n"):
            raise EOFError("unexpected end of input")
        return line.strip()

    def ask_with_default(self, question: str, default: str) -> str:
        """Ask with ``default`` shown in brackets; an empty answer gives the default."""
        response = self.ask(f"{question} [{default}]: ")
        return response or default

    def ask_yes_no(self, question: str, default_yes: bool) -> bool:
        """Ask a yes/no question; an empty answer gives the default."""
        hint = "[Y/n]" if default_yes else "[y/N]"
        response = self.ask(f"{question} {hint}: ").lower()
        if not response:
            return default_yes
        return response in ("y", "yes")

    def ask_choice(self, question: str, options: list[str]) -> str:
        """List ``options`` numbered from 1 and ask until a valid number is given."""
        lines = [question, *(f"  {i}) {opt}" for i, opt in enumerate(options, start=1)), ""]
        self._write("\n".join(lines) + "\n")

        prompt = f"Select [1-{len(options)}]: "
        while True:
            response = self.ask(prompt)
            match = _LEADING_INT.match(response)
            if match:
                choice = int(match.group())
                if 1 <= choice <= len(options):
                    return options[choice - 1]
            self._write(f"Invalid choice. Please enter 1-{len(options)}: ")

    def validate_name(self, name: str) -> None:
        """Raise ``ValueError`` unless ``name`` is lowercase alphanumeric with hyphens."""
        if not name:
            raise ValueError("name cannot be empty")
        if not is_valid_name(name):
            raise ValueError(
                "invalid name. Use lowercase alphanumeric with hyphens.\n"
                "  Examples: claude, gpt-4, my-agent"
            )

    def ask_validated_name(self, question: str) -> str:
        """Ask for a name until a valid one is given."""
        while True:
            name = self.ask(question)
            try:
                self.validate_name(name)
            except ValueError as exc:
                self._write(f"✗ {exc}\n\n")
                continue
            return name

    def ask_optional(self, question: str) -> str:
        """Ask for a value that may be left empty."""
        return self.ask(f"{question} (optional): ")

    def print_header(self, title: str) -> None:
        """Print a section header underlined with a rule."""
        self._write(f"\n{title}\n{'─' * 60}\n\n")

    def print_success(self, message: str) -> None:
        """Print a success line."""
        self._write(f"✓ {message}\n")

    def print_error(self, message: str) -> None:
        """Print an error line."""
        self._write(f"✗ {message}\n")

    def print_warning(self, message: str) -> None:
        """Print a warning line."""
        self._write(f"⚠ {message}\n")