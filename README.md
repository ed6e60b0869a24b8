# shellfish

shellfish is the core of a small POSIX command shell. You give it a
list of tokens: words, pipes and redirections. It groups them into
commands and runs them. A command is either one of the shell's builtins
or an external program. Several commands joined by pipes run as a
pipeline.

## Modules

- `shellfish.textutil`: text helpers that the rest of the package uses.
  - `atoi` and `atoll` read the leading integer of a string, wrapped to
    32 and 64 bits.
  - `split` splits a string and drops empty pieces.
  - `strncmp` compares strings in the manner of the C function.
- `shellfish.env`: `Environment` holds variables in insertion order.
  - Build one with `Environment.from_strings` from `NAME=VALUE` strings.
    `parse_entry` splits a single such string.
  - `get` returns the value of the first variable whose name *starts
    with* the given name. `update` sets the first variable whose name is
    a prefix of the given key.
  - `add` appends a variable. `remove` deletes the first variable whose
    name matches exactly.
  - `to_strings` and `items` read the variables back out.
- `shellfish.parser`:
  - `TokenType` lists the kinds of token. A `Token` pairs a text with
    its kind.
  - `parse(tokens, env)` returns a list of `Command` objects. Each
    `Command` holds:
    - its arguments,
    - the resolved program path,
    - the file descriptors opened for `<`, `>` and `>>`,
    - a status of 1 if a redirection file could not be opened.
  - `find_path` resolves a program name against `PATH`. A name that
    contains `/` is checked directly. Otherwise the search starts at the
    *second* `PATH` entry.
  - `Command.close` and `close_commands` release the open files.
- `shellfish.shell`:
  - `Shell` holds a session's environment, its working directory, its
    `PromptParams` and its last exit status.
  - `Shell.create` raises `SHLVL` by one if it is set.
  - `Shell.handle_interrupt` writes a newline and sets the status to
    130.
  - `banner()` returns the coloured start-up greeting.
- `shellfish.prompt`: `build_prompt` builds the prompt.
  - It shows a coloured `(status)` prefix, green for 0 and red otherwise.
  - It shows the working directory, with the home directory shortened
    to `~`.
  - The parts it draws on are also available as `exit_status_text` and
    `home_relative`.
- `shellfish.builtins`: the builtins.
  - `echo` expands `$NAME` and `$?`, and follows single and double
    quotes.
  - `cd` handles no argument, `-` and `~`, and keeps `PWD` and `OLDPWD`
    up to date.
  - `pwd` prints the working directory.
  - `print_env` prints `NAME=VALUE` lines for every variable except the
    last.
  - `unset` removes variables.
  - `exit_shell` raises `ShellExit` with the exit code modulo 256. If
    the argument is not numeric, it sets the status to 2 and does not
    exit.
  - `is_builtin` says whether a name is a builtin. `run_builtin`
    dispatches on `command.args[0]`.
- `shellfish.executor`: runs parsed lines.
  - `run_line` runs a lone builtin inside the shell. Anything else goes
    to `execute`, which connects the commands with pipes.
    - A builtin inside a pipeline runs in a forked child.
    - An unknown program gives status 127.
    - A program that cannot be started gives status 126.
    - A signal gives status 128 plus the signal number
      (`exit_code_from_returncode`).
  - The last command's status becomes the shell's.

## Example

```python
import io
from shellfish.shell import Shell
from shellfish.parser import Token, TokenType, parse
from shellfish.executor import run_line
from shellfish.builtins import echo
from shellfish.prompt import build_prompt

shell = Shell.create(["HOME=/home/user", "PATH=/usr/bin:/bin", "SHLVL=1"], "/home/user")
shell.env.get("SHLVL")          # "2"

out = io.StringIO()
echo(shell, ["echo", "$HOME", "'$HOME'"], out)
out.getvalue()                  # "/home/user $HOME\n"

build_prompt(shell)             # green "(0) " then "~ | 🐚: "

tokens = [Token("ls"), Token("|", TokenType.PIPE), Token("wc"), Token("-l")]
commands = parse(tokens, shell.env)
run_line(shell, commands)       # runs ls | wc -l and returns its status
```

`Shell.create()` with no arguments uses the process environment and the
current directory.

## What it does not do

- It has no tokenizer. Command lines must be supplied as `Token` lists.
- It has no interactive read loop and no command to start it.
- Heredocs (`HEREDOC` tokens) are recognised as a token kind, but the
  parser ignores them.
- `export` and a few other names count as builtins, but running them
  does nothing.

## Running the tests

Install the `test` extra, then run `pytest` from the project directory.