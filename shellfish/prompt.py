"""The interactive prompt string."""

from __future__ import annotations

from shellfish.shell import Shell

_SHELL_MARK = "🐚: "


def exit_status_text(status: int) -> str:
    """Coloured ``(status)`` prefix: green for success, red otherwise."""
    colour = "\033[92m(" if status == 0 else "\033[31m("
    return f"{colour}{status}) \033[0m"


def home_relative(pwd: str, home: str) -> str:
    """Prompt body showing ``pwd`` with the home directory shortened to ``~``."""
    return f"\033[32m~{pwd[len(home):]} \033[0m| {_SHELL_MARK}"


def build_prompt(shell: Shell) -> str:
    """The full prompt for ``shell`` according to its prompt parameters."""
    if shell.prompt_params.pwd:
        pwd = shell.pwd or ""
        home = shell.env.get("HOME")
        if home is not None and pwd.startswith(home):
            prompt = home_relative(pwd, home)
        else:
            prompt = f"{pwd} | {_SHELL_MARK}"
    else:
        prompt = _SHELL_MARK
    if shell.prompt_params.exit_status:
        prompt = exit_status_text(shell.last_status) + prompt
    return prompt