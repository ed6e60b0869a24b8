"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Sequence
from typing import TextIO

from shellfish.parser import Command
from shellfish.shell import Shell, banner
from shellfish.textutil import atoll, strncmp

BUILTIN_NAMES = frozenset(
    {
        "exit",
        "cd",
        "echo",
        "pwd",
        "export",
        "env",
        "ms_header",
        "set_prompt_exit",
        "ntome",
        "gajanvie",
        "unset",
    }
)

_QUOTES = "\"'"
_VAR_NAME = re.compile(r"[A-Za-z0-9_]*")
_EXIT_PREFIX = "petit coquillage: exit: "
_CD_PREFIX = "Minishell: cd: "


class ShellExit(Exception):
    """Raised by ``exit`` to end the session with ``code``."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


def is_builtin(name: str) -> bool:
    """Whether ``name`` is handled by the shell itself."""
    return name in BUILTIN_NAMES


def is_numeric(text: str) -> bool:
    """Whether ``text`` is a canonical decimal integer that fits in 64 bits."""
    if strncmp(text, str(atoll(text)), len(text)) != 0:
        return False
    return all(
        "0" <= ch <= "9" or (pos == 0 and ch in "+-")
        for pos, ch in enumerate(text)
    )


def _is_quoted(word: str | None) -> bool:
    return bool(word) and word[0] in _QUOTES


def expand_word(shell: Shell, word: str) -> str:
    """The text ``echo`` prints for one word, with quotes and ``$`` handled.

    A word opening with a quote ends at the next matching quote. Inside
    single quotes no variables are expanded. A bare ``$`` (or ``$?``)
    stands for the last exit status. The character right after a
    variable name is consumed along with it.
    """
    quote = word[0] if _is_quoted(word) else ""
    pos = 1 if quote else 0
    size = len(word)
    pieces: list[str] = []
    while pos < size and word[pos] != quote:
        if word[pos] == "$" and quote != "'":
            start = pos + 1
            match = _VAR_NAME.match(word, start)
            pos = match.end() if match else start
            name = word[start:pos]
            if not name:
                pieces.append(str(shell.last_status))
            else:
                value = shell.env.get(name)
                if value is not None:
                    pieces.append(value)
        else:
            pieces.append(word[pos])
        pos += 1
    return "".join(pieces)


def echo(shell: Shell, args: Sequence[str], out: TextIO | None = None) -> None:
    """Print the expanded words of ``args[1:]`` followed by a newline."""
    out = sys.stdout if out is None else out
    words = list(args[1:])
    followers: list[str | None] = [*words[1:], None]
    for word, following in zip(words, followers):
        out.write(expand_word(shell, word))
        if not _is_quoted(following):
            out.write(" ")
    out.write("\n")


def _update_pwds(shell: Shell) -> None:
    old_pwd = shell.env.get("PWD")
    if old_pwd is not None:
        shell.env.update("OLDPWD", old_pwd)
    try:
        cwd = os.getcwd()
    except OSError:
        return
    shell.env.update("PWD", cwd)
    shell.pwd = cwd


def _cd_target(shell: Shell, args: Sequence[str], err: TextIO) -> str | None:
    if len(args) < 2:
        home = shell.env.get("HOME")
        if home is None:
            err.write(f"{_CD_PREFIX}HOME not set\n")
        return home
    target = args[1]
    if target == "-":
        old = shell.env.get("OLDPWD")
        if old is None:
            err.write(f"{_CD_PREFIX}OLDPWD not set\n")
        return old
    if target.startswith("~"):
        home = shell.env.get("HOME")
        if home is None:
            err.write(f"{_CD_PREFIX}HOME not set\n")
            return None
        return home if target == "~" else home + target[1:]
    return target


def cd(
    shell: Shell,
    args: Sequence[str],
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Change directory; returns 0 on success and 1 on failure."""
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err
    if len(args) > 2:
        err.write(f"{_CD_PREFIX}too many arguments\n")
        return 1
    target = _cd_target(shell, args, err)
    if target is None:
        return 1
    try:
        os.chdir(target)
    except OSError as exc:
        label = f"{target}: " if target else ""
        err.write(f"{_CD_PREFIX}{label}{exc.strerror}\n")
        return 1
    if len(args) == 2 and args[1] == "-":
        out.write(f"{target}\n")
    _update_pwds(shell)
    return 0


def pwd(out: TextIO | None = None) -> None:
    """Print the current working directory."""
    out = sys.stdout if out is None else out
    out.write(f"{os.getcwd()}\n")


def print_env(shell: Shell, out: TextIO | None = None) -> None:
    """Print ``NAME=VALUE`` lines for every variable but the last one."""
    out = sys.stdout if out is None else out
    for key, value in shell.env.items()[:-1]:
        out.write(f"{key}={value if value is not None else ''}\n")


def unset(shell: Shell, args: Sequence[str]) -> int:
    """Remove each variable named in ``args[1:]``."""
    for name in args[1:]:
        shell.env.remove(name)
    return 0


def exit_shell(
    shell: Shell,
    args: Sequence[str] | None,
    print_exit: bool,
    out: TextIO | None = None,
) -> None:
    """End the session by raising ShellExit, unless the argument is not numeric."""
    out = sys.stdout if out is None else out
    args = list(args or [])
    if len(args) >= 2 and not is_numeric(args[1]):
        out.write(f"{_EXIT_PREFIX}{args[1]} : numeric argument needed\n")
        shell.status = 2
        shell.last_status = 2
        return
    if len(args) > 2:
        out.write(f"{_EXIT_PREFIX}too much arguments\n")
        shell.status = 1
    elif len(args) == 2:
        shell.status = atoll(args[1])
    if print_exit:
        out.write("exit\n")
    raise ShellExit(shell.status % 256)


def run_builtin(
    shell: Shell,
    command: Command,
    print_exit: bool,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> None:
    """Run the builtin named by ``command.args[0]``."""
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err
    args = command.args
    name = args[0]
    if name == "exit":
        exit_shell(shell, args, print_exit, out)
    elif name == "cd":
        shell.last_status = cd(shell, args, out, err)
    elif name == "pwd":
        pwd(out)
    elif name == "env":
        print_env(shell, out)
    elif name == "unset":
        unset(shell, args)
    elif name == "echo":
        echo(shell, args, out)
    elif name == "ms_header":
        out.write(banner())