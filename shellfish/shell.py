"""Shell state and start-up."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TextIO

from shellfish.env import Environment
from shellfish.textutil import atoi

C1 = "\033[38;5;129m"
C2 = "\033[38;5;171m"
C3 = "\033[38;5;210m"
C4 = "\033[38;5;45m"
C5 = "\033[32m"
C6 = "\033[33m"
RESET = "\033[0m"

INTERRUPT_STATUS = 130


@dataclass
class PromptParams:
    """Which parts the prompt shows."""

    exit_status: bool = True
    pwd: bool = True


@dataclass
class Shell:
    """State of one interactive session."""

    env: Environment
    pwd: str | None
    prompt_params: PromptParams = field(default_factory=PromptParams)
    status: int = 0
    last_status: int = 0

    @classmethod
    def create(
        cls, environ: Iterable[str] | None = None, cwd: str | None = None
    ) -> Shell:
        """Start a session from ``NAME=VALUE`` strings, raising SHLVL by one."""
        if environ is None:
            environ = [f"{k}={v}" for k, v in os.environ.items()]
        if cwd is None:
            cwd = os.getcwd()
        shell = cls(env=Environment.from_strings(environ), pwd=cwd)
        old_level = shell.env.get("SHLVL")
        if old_level is not None:
            shell.env.update("SHLVL", str(atoi(old_level) + 1))
        return shell

    def handle_interrupt(self, out: TextIO) -> None:
        """React to Ctrl-C at the prompt: new line and status 130."""
        out.write("\n")
        out.flush()
        self.last_status = INTERRUPT_STATUS


def banner() -> str:
    """The coloured greeting shown at start-up."""
    return "".join(
        [
            C1,
            "  /$$$$$$                                /$$ /$$ /$$\n",
            " /$$__  $$                              |__/| $$| $$\n",
            C2,
            "| $$  \\__/  /$$$$$$   /$$$$$$  /$$   /$$ /$$| $$| $$",
            "  /$$$$$$   /$$$$$$   /$$$$$$ \n",
            "| $$       /$$__  $$ /$$__  $$| $$  | $$| $$| $$| $$",
            " |____  $$ /$$__  $$ /$$__  $$\n",
            C3,
            "| $$      | $$  \\ $$| $$  \\ $$| $$  | $$| $$| $$| $$",
            "  /$$$$$$$| $$  \\ $$| $$$$$$$$\n",
            "| $$    $$| $$  | $$| $$  | $$| $$  | $$| $$| $$| $$",
            " /$$__  $$| $$  | $$| $$_____/\n",
            C4,
            "|  $$$$$$/|  $$$$$$/|  $$$$$$$|  $$$$$$/| $$| $$| $$",
            "|  $$$$$$$|  $$$$$$$|  $$$$$$$\n",
            " \\______/  \\______/  \\____  $$ \\______/ |__/|__/|__/",
            " \\_______/ \\____  $$ \\_______/\n",
            "                          ",
            "| $$                                 /$$",
            "  \\ $$\n                          ",
            "| $$                            ",
            "    |  $$$$$$/\n                          ",
            "|__/                     ",
            "            \\______/ \n",
            RESET,
        ]
    )