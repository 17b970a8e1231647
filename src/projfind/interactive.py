"""
Terminal picker and file opener used by the command line interface.

The picker presents catalog labels as a numbered list and returns the chosen
label, or None when the user cancels. The opener hands a path to the user's
editor.
"""

import os
import shlex
import subprocess
import sys
import logging
from typing import Callable, List, Optional, TextIO


logger = logging.getLogger(__name__)

Picker = Callable[[List[str]], Optional[str]]


def prompt_choice(
    labels: List[str],
    input_fn: Callable[[str], str] = input,
    output: Optional[TextIO] = None,
) -> Optional[str]:
    """
    Ask the user to choose one label.

    Accepts either the number shown next to a label or the exact label text.
    An empty answer or end of input cancels.

    Returns:
        The chosen label, or None on cancel or when there is nothing to choose
    """
    if not labels:
        return None
    output = output or sys.stdout

    for index, label in enumerate(labels, start=1):
        output.write(f"{index:>4}  {label}\n")
    output.flush()

    while True:
        try:
            answer = input_fn("Find file: ").strip()
        except (EOFError, KeyboardInterrupt):
            output.write("\n")
            return None

        if not answer:
            return None
        if answer in labels:
            return answer
        if answer.isdigit() and 1 <= int(answer) <= len(labels):
            return labels[int(answer) - 1]
        output.write(f"No match for '{answer}', enter a number between 1 and {len(labels)}\n")


def editor_command(environ=None) -> Optional[List[str]]:
    """Return the editor command from $VISUAL or $EDITOR, split shell-style."""
    environ = os.environ if environ is None else environ
    for name in ('VISUAL', 'EDITOR'):
        value = environ.get(name, '').strip()
        if value:
            return shlex.split(value)
    return None


def open_file(path: str, output: Optional[TextIO] = None, environ=None) -> int:
    """
    Open ``path`` in the user's editor, or print it when no editor is set.

    Returns:
        The editor's exit status, 0 when the path was printed
    """
    command = editor_command(environ)
    if command is None:
        output = output or sys.stdout
        output.write(f"{path}\n")
        return 0

    logger.debug(f"Opening {path} with {command}")
    return subprocess.call([*command, path])
