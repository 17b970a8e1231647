"""
Subprocess boundary for the Project File Finder.

Every external tool (the VCS executable, find, grep, xargs) is invoked through
this module as a synchronous call returning a ``CommandResult``. A non-zero
exit status is a value the caller inspects, not an exception, so callers can
tell "not a repository" apart from a real failure. Working directories are
handed to the child process only; the caller's own working directory is never
changed.
"""

import subprocess
import tempfile
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence


logger = logging.getLogger(__name__)

# Shell convention for "command not found".
EXIT_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of one subprocess invocation.

    Attributes:
        exit_status: Process exit status (127 when the executable is missing)
        stdout: Captured standard output
        stderr: Captured standard error
    """
    exit_status: int
    stdout: str
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


class CommandFailedError(Exception):
    """Raised when a subprocess other than the repository check fails."""

    def __init__(self, argv: Sequence[str], result: CommandResult):
        self.argv = list(argv)
        self.result = result
        detail = result.stderr.strip() or f"exit status {result.exit_status}"
        super().__init__(f"Command failed: {' '.join(self.argv)}: {detail}")


Runner = Callable[..., CommandResult]


def run_command(argv: Sequence[str], cwd: str, timeout: Optional[int] = None) -> CommandResult:
    """
    Run a command synchronously and capture its output as text.

    Args:
        argv: Command and arguments, passed without a shell
        cwd: Working directory for the child process
        timeout: Optional timeout in seconds

    Returns:
        CommandResult with the exit status and captured streams

    Raises:
        CommandFailedError: If the command times out
    """
    logger.debug(f"Running {list(argv)} in {cwd}")
    try:
        completed = subprocess.run(
            list(argv),
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        # Raised both for a missing executable and a missing cwd.
        logger.debug(f"Cannot start {argv[0]} in {cwd}")
        return CommandResult(EXIT_NOT_FOUND, "", f"{argv[0]}: cannot run in {cwd}: command or directory not found")
    except NotADirectoryError:
        return CommandResult(EXIT_NOT_FOUND, "", f"{cwd}: not a directory")
    except subprocess.TimeoutExpired as e:
        raise CommandFailedError(argv, CommandResult(-1, "", f"timed out after {e.timeout} seconds")) from e

    return CommandResult(completed.returncode, completed.stdout, completed.stderr)


def run_pipeline(stages: Sequence[Sequence[str]], cwd: str, timeout: Optional[int] = None) -> CommandResult:
    """
    Run argv stages connected by pipes, without a shell.

    The result carries the last stage's stdout and exit status; stderr is
    collected from every stage.

    Args:
        stages: Argument vectors, each stage reading the previous one's stdout
        cwd: Working directory for every stage
        timeout: Optional timeout in seconds for the final stage

    Returns:
        CommandResult for the pipeline

    Raises:
        CommandFailedError: If the pipeline times out
    """
    if len(stages) == 1:
        return run_command(stages[0], cwd, timeout)

    logger.debug(f"Running pipeline {[list(stage) for stage in stages]} in {cwd}")
    processes: List[subprocess.Popen] = []
    error_files = []
    previous_stdout = None
    try:
        for index, stage in enumerate(stages):
            is_last = index == len(stages) - 1
            # Upstream stderr goes to a file so a chatty stage cannot block on a full pipe.
            if is_last:
                stderr_target = subprocess.PIPE
            else:
                stderr_target = tempfile.TemporaryFile(mode='w+')
                error_files.append(stderr_target)
            try:
                process = subprocess.Popen(
                    list(stage),
                    cwd=cwd,
                    stdin=previous_stdout,
                    stdout=subprocess.PIPE,
                    stderr=stderr_target,
                    text=True,
                )
            except (FileNotFoundError, NotADirectoryError):
                return CommandResult(EXIT_NOT_FOUND, "", f"{stage[0]}: cannot run in {cwd}: command or directory not found")
            if previous_stdout is not None:
                # Upstream receives SIGPIPE if the downstream stage exits early.
                previous_stdout.close()
            processes.append(process)
            previous_stdout = process.stdout

        last = processes[-1]
        try:
            stdout, last_stderr = last.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            raise CommandFailedError(stages[-1], CommandResult(-1, "", f"timed out after {e.timeout} seconds")) from e

        stderr_parts = []
        for process, error_file in zip(processes[:-1], error_files):
            process.wait()
            error_file.seek(0)
            stderr_parts.append(error_file.read())
        stderr_parts.append(last_stderr)
        return CommandResult(last.returncode, stdout, "".join(part for part in stderr_parts if part))
    finally:
        for process in processes:
            if process.poll() is None:
                process.kill()
                process.wait()
            if process.stdout is not None and not process.stdout.closed:
                process.stdout.close()
        for error_file in error_files:
            error_file.close()
