"""Turn a token stream into a list of commands joined by pipes."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto

from shellfish.env import Environment
from shellfish.textutil import split

NO_FD = -2


class TokenType(Enum):
    """Kinds of lexical tokens."""

    WORD = auto()
    PIPE = auto()
    REDIR_IN = auto()
    REDIR_OUT = auto()
    HEREDOC = auto()
    APPEND = auto()
    TOKEN_ERROR = auto()
    END = auto()


@dataclass
class Token:
    """One lexical token."""

    content: str
    type: TokenType = TokenType.WORD


_OPEN_MODES = {
    TokenType.REDIR_IN: os.O_RDONLY,
    TokenType.REDIR_OUT: os.O_CREAT | os.O_WRONLY | os.O_TRUNC,
    TokenType.APPEND: os.O_CREAT | os.O_WRONLY | os.O_APPEND,
}


def _report(name: str, exc: OSError) -> None:
    print(f"{name}: {exc.strerror}", file=sys.stderr)


def _safe_close(fd: int) -> None:
    if fd > 2:
        try:
            os.close(fd)
        except OSError:
            pass


@dataclass
class Command:
    """A simple command: its arguments, resolved path and redirections."""

    args: list[str] = field(default_factory=list)
    cmd_path: str | None = None
    fd_in: int = NO_FD
    fd_out: int = NO_FD
    status: int = 0

    def add_arg(self, content: str, env: Environment) -> None:
        """Append an argument; the first one is looked up on PATH."""
        self.args.append(content)
        if len(self.args) == 1:
            self.cmd_path = find_path(env, content)

    def _redirect(self, kind: TokenType, target: str) -> None:
        flags = _OPEN_MODES[kind]
        reading = kind is TokenType.REDIR_IN
        previous = self.fd_in if reading else self.fd_out
        if previous >= 0:
            os.close(previous)
        try:
            fd = os.open(target, flags, 0o644)
        except OSError as exc:
            fd = -1
            self.status = 1
            _report("file" if kind is TokenType.APPEND else target, exc)
        if reading:
            self.fd_in = fd
        else:
            self.fd_out = fd

    def close(self) -> None:
        """Close any redirection files this command holds open."""
        _safe_close(self.fd_in)
        _safe_close(self.fd_out)
        self.fd_in = NO_FD
        self.fd_out = NO_FD


def close_commands(commands: Iterable[Command]) -> None:
    """Close every command's redirection files."""
    for command in commands:
        command.close()


def find_path(env: Environment, cmd: str) -> str | None:
    """Resolve ``cmd`` to an executable path, or None if none is found."""
    if "/" in cmd:
        return cmd if os.access(cmd, os.X_OK) else None
    path_value = env.lookup_exact_prefix("PATH")
    if path_value is None:
        return None
    # The search begins at the second PATH entry.
    for directory in split(path_value, ":")[1:]:
        candidate = f"{directory}/{cmd}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def parse(tokens: Iterable[Token], env: Environment) -> list[Command]:
    """Group tokens into commands, opening redirection files as they appear."""
    commands = [Command()]
    stream = iter(tokens)
    for token in stream:
        current = commands[-1]
        if token.type is TokenType.PIPE:
            commands.append(Command())
        elif token.type in _OPEN_MODES:
            target = next(stream, None)
            if target is None:
                raise ValueError("redirection without a target")
            current._redirect(token.type, target.content)
        elif token.type is TokenType.WORD:
            current.add_arg(token.content, env)
    return commands