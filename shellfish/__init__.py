"""Core of a command shell: environment, command parsing, builtins, prompt and pipeline execution."""

__version__ = "0.1.0"

__all__ = ["builtins", "env", "executor", "parser", "prompt", "shell", "textutil"]