"""Run parsed command lines: single builtins in place, everything else as a pipeline."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from shellfish.builtins import ShellExit, is_builtin, run_builtin
from shellfish.parser import Command, close_commands
from shellfish.shell import Shell

NOT_FOUND_STATUS = 127
CANNOT_EXECUTE_STATUS = 126
SIGNAL_BASE = 128


class _Running(Protocol):
    def wait(self) -> int: ...


@dataclass
class _Finished:
    """A pipeline stage that ended without starting a process."""

    code: int

    def wait(self) -> int:
        return self.code


@dataclass
class _ForkedChild:
    """A builtin running in a forked copy of the shell."""

    pid: int

    def wait(self) -> int:
        _, status = os.waitpid(self.pid, 0)
        return os.waitstatus_to_exitcode(status)


def _safe_close(fd: int) -> None:
    if fd > 2:
        try:
            os.close(fd)
        except OSError:
            pass


def exit_code_from_returncode(returncode: int) -> int:
    """Shell exit status for a child's return code; signals map to 128 + signal."""
    if returncode < 0:
        return SIGNAL_BASE - returncode
    return returncode


def _child_env(shell: Shell) -> dict[str, str]:
    return {key: value if value is not None else "" for key, value in shell.env.items()}


def _fork_builtin(
    shell: Shell,
    command: Command,
    stdin: int | None,
    stdout: int | None,
    extra_fds: Sequence[int],
) -> _ForkedChild:
    sys.stdout.flush()
    sys.stderr.flush()
    pid = os.fork()
    if pid:
        return _ForkedChild(pid)
    code = 0
    try:
        if stdin is not None:
            os.dup2(stdin, 0)
        if stdout is not None:
            os.dup2(stdout, 1)
        for fd in extra_fds:
            _safe_close(fd)
        out = os.fdopen(1, "w", closefd=False)
        err = os.fdopen(2, "w", closefd=False)
        try:
            run_builtin(shell, command, False, out, err)
        except ShellExit as exc:
            code = exc.code
        out.flush()
        err.flush()
    except BaseException:
        code = 1
    finally:
        os._exit(code)


def _launch(
    shell: Shell,
    command: Command,
    env: dict[str, str],
    prev_read: int,
    read_end: int,
    write_end: int,
    has_next: bool,
) -> _Running:
    if command.status == 1:
        return _Finished(1)
    if not command.args:
        return _Finished(0)

    if command.fd_in >= 0:
        stdin: int | None = command.fd_in
    elif prev_read >= 0:
        stdin = prev_read
    else:
        stdin = None
    if command.fd_out >= 0:
        stdout: int | None = command.fd_out
    elif has_next:
        stdout = write_end
    else:
        stdout = None

    if is_builtin(command.args[0]):
        extra = (read_end, write_end, prev_read, command.fd_in, command.fd_out)
        return _fork_builtin(shell, command, stdin, stdout, extra)

    if command.cmd_path is None:
        sys.stderr.write(f"Minishell: command not found: {command.args[0]}\n")
        sys.stderr.flush()
        return _Finished(NOT_FOUND_STATUS)

    try:
        return subprocess.Popen(
            command.args,
            executable=command.cmd_path,
            stdin=stdin,
            stdout=stdout,
            env=env,
        )
    except OSError as exc:
        sys.stderr.write(f"execve: {exc.strerror}\n")
        sys.stderr.flush()
        return _Finished(CANNOT_EXECUTE_STATUS)


def execute(shell: Shell, commands: Iterable[Command]) -> int:
    """Run ``commands`` connected by pipes; the last one's status becomes the shell's."""
    commands = list(commands)
    env = _child_env(shell)
    running: list[_Running] = []
    prev_read = -1
    for pos, command in enumerate(commands):
        has_next = pos < len(commands) - 1
        read_end, write_end = os.pipe() if has_next else (-1, -1)
        try:
            running.append(
                _launch(shell, command, env, prev_read, read_end, write_end, has_next)
            )
        finally:
            _safe_close(prev_read)
            if has_next:
                _safe_close(write_end)
                prev_read = read_end
            else:
                prev_read = -1
            command.close()

    code = 0
    for stage in running:
        code = exit_code_from_returncode(stage.wait())
    shell.last_status = code
    return code


def run_line(shell: Shell, commands: Sequence[Command]) -> int:
    """Run one parsed line and release its files; a lone builtin runs in the shell itself."""
    try:
        if len(commands) == 1 and commands[0].args and is_builtin(commands[0].args[0]):
            run_builtin(shell, commands[0], True)
            return shell.last_status
        return execute(shell, commands)
    finally:
        close_commands(commands)