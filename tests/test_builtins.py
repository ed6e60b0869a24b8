import io
import os

import pytest

from shellfish.builtins import (
    ShellExit,
    cd,
    echo,
    exit_shell,
    expand_word,
    is_builtin,
    is_numeric,
    print_env,
    pwd,
    run_builtin,
    unset,
)
from shellfish.parser import Command
from shellfish.shell import Shell, banner


def make_shell(*entries, cwd="/"):
    return Shell.create(environ=list(entries), cwd=cwd)


@pytest.mark.parametrize(
    "name",
    ["exit", "cd", "echo", "pwd", "export", "env", "ms_header",
     "set_prompt_exit", "ntome", "gajanvie", "unset"],
)
def test_is_builtin_true(name):
    assert is_builtin(name) is True


@pytest.mark.parametrize("name", ["ls", "", "ECHO", "exits"])
def test_is_builtin_false(name):
    assert is_builtin(name) is False


@pytest.mark.parametrize(
    "text, expected",
    [
        ("42", True),
        ("-42", True),
        ("+42", False),
        ("007", False),
        ("12a", False),
        ("abc", False),
        ("-", False),
        ("", True),
        ("9223372036854775807", True),
        ("-9223372036854775808", True),
        ("9223372036854775808", False),
    ],
)
def test_is_numeric(text, expected):
    assert is_numeric(text) is expected


def test_expand_word_plain_and_variables():
    shell = make_shell("FOO=bar")
    assert expand_word(shell, "plain") == "plain"
    assert expand_word(shell, "$FOO") == "bar"
    assert expand_word(shell, '"$FOO"') == "bar"
    assert expand_word(shell, "'$FOO'") == "$FOO"
    assert expand_word(shell, "$MISSING") == ""


def test_expand_word_status():
    shell = make_shell()
    shell.last_status = 7
    assert expand_word(shell, "$?") == "7"
    assert expand_word(shell, "$") == "7"


def test_expand_word_consumes_char_after_name():
    shell = make_shell("FOO=bar")
    assert expand_word(shell, "$FOO/x") == "bar" + "x"


def test_expand_word_stops_at_closing_quote():
    shell = make_shell()
    assert expand_word(shell, "'ab'cd") == "ab"


def test_echo_no_args():
    out = io.StringIO()
    echo(make_shell(), ["echo"], out)
    assert out.getvalue() == "\n"


def test_echo_words_each_followed_by_space():
    out = io.StringIO()
    echo(make_shell(), ["echo", "a", "b"], out)
    assert out.getvalue() == "a b \n"


def test_echo_no_space_before_quoted_word():
    out = io.StringIO()
    echo(make_shell(), ["echo", "a", "'b'"], out)
    assert out.getvalue() == "ab \n"


@pytest.fixture
def home(tmp_path, monkeypatch):
    base = tmp_path.resolve()
    (base / "sub").mkdir()
    monkeypatch.chdir(base)
    return base


def test_cd_relative_updates_pwds(home):
    shell = make_shell(f"HOME={home}", f"PWD={home}", "OLDPWD=", cwd=str(home))
    out, err = io.StringIO(), io.StringIO()
    assert cd(shell, ["cd", "sub"], out, err) == 0
    assert os.getcwd() == str(home / "sub")
    assert shell.pwd == os.getcwd()
    assert shell.env.get("PWD") == str(home / "sub")
    assert shell.env.get("OLDPWD") == str(home)
    assert err.getvalue() == ""


def test_cd_without_args_goes_home(home):
    os.chdir(home / "sub")
    shell = make_shell(f"HOME={home}", f"PWD={home / 'sub'}")
    assert cd(shell, ["cd"], io.StringIO(), io.StringIO()) == 0
    assert os.getcwd() == str(home)


def test_cd_tilde_expansion(home):
    shell = make_shell(f"HOME={home}")
    assert cd(shell, ["cd", "~/sub"], io.StringIO(), io.StringIO()) == 0
    assert os.getcwd() == str(home / "sub")


def test_cd_dash_prints_target(home):
    shell = make_shell(f"OLDPWD={home / 'sub'}")
    out = io.StringIO()
    assert cd(shell, ["cd", "-"], out, io.StringIO()) == 0
    assert out.getvalue() == f"{home / 'sub'}\n"
    assert os.getcwd() == str(home / "sub")


def test_cd_errors(home):
    shell = make_shell()
    err = io.StringIO()
    assert cd(shell, ["cd"], io.StringIO(), err) == 1
    assert err.getvalue() == "Minishell: cd: HOME not set\n"

    err = io.StringIO()
    assert cd(shell, ["cd", "-"], io.StringIO(), err) == 1
    assert err.getvalue() == "Minishell: cd: OLDPWD not set\n"

    err = io.StringIO()
    assert cd(shell, ["cd", "a", "b"], io.StringIO(), err) == 1
    assert err.getvalue() == "Minishell: cd: too many arguments\n"

    err = io.StringIO()
    assert cd(shell, ["cd", "nowhere"], io.StringIO(), err) == 1
    assert err.getvalue().startswith("Minishell: cd: nowhere: ")
    assert os.getcwd() == str(home)


def test_run_builtin_cd_sets_last_status(home):
    shell = make_shell()
    run_builtin(shell, Command(args=["cd", "nowhere"]), True,
                io.StringIO(), io.StringIO())
    assert shell.last_status == 1
    run_builtin(shell, Command(args=["cd", "sub"]), True,
                io.StringIO(), io.StringIO())
    assert shell.last_status == 0


def test_pwd_prints_cwd(home):
    out = io.StringIO()
    pwd(out)
    assert out.getvalue() == f"{home}\n"


def test_print_env_skips_last_variable():
    shell = make_shell("A=1", "B=2", "C=3")
    out = io.StringIO()
    print_env(shell, out)
    assert out.getvalue() == "A=1\nB=2\n"


def test_unset_removes_named_variables():
    shell = make_shell("A=1", "B=2", "C=3")
    assert unset(shell, ["unset", "A", "C", "MISSING"]) == 0
    assert list(shell.env) == ["B"]


def test_exit_without_args():
    shell = make_shell()
    out = io.StringIO()
    with pytest.raises(ShellExit) as info:
        exit_shell(shell, ["exit"], True, out)
    assert info.value.code == 0
    assert out.getvalue() == "exit\n"


def test_exit_with_code_and_no_print():
    shell = make_shell()
    out = io.StringIO()
    with pytest.raises(ShellExit) as info:
        exit_shell(shell, ["exit", "3"], False, out)
    assert info.value.code == 3
    assert out.getvalue() == ""


def test_exit_negative_code_wraps():
    with pytest.raises(ShellExit) as info:
        exit_shell(make_shell(), ["exit", "-1"], False, io.StringIO())
    assert info.value.code == 255


def test_exit_non_numeric_does_not_exit():
    shell = make_shell()
    out = io.StringIO()
    exit_shell(shell, ["exit", "abc"], True, out)
    assert shell.status == 2
    assert shell.last_status == 2
    assert out.getvalue() == "petit coquillage: exit: abc : numeric argument needed\n"


def test_exit_too_many_arguments():
    shell = make_shell()
    out = io.StringIO()
    with pytest.raises(ShellExit) as info:
        exit_shell(shell, ["exit", "5", "6"], False, out)
    assert info.value.code == 1
    assert out.getvalue() == "petit coquillage: exit: too much arguments\n"


def test_exit_uses_previous_status():
    shell = make_shell()
    exit_shell(shell, ["exit", "x"], False, io.StringIO())
    with pytest.raises(ShellExit) as info:
        exit_shell(shell, None, False, io.StringIO())
    assert info.value.code == 2


def test_run_builtin_header_and_exit():
    shell = make_shell()
    out = io.StringIO()
    run_builtin(shell, Command(args=["ms_header"]), True, out, io.StringIO())
    assert out.getvalue() == banner()
    with pytest.raises(ShellExit):
        run_builtin(shell, Command(args=["exit"]), True, io.StringIO(), io.StringIO())


def test_run_builtin_echo_and_unset():
    shell = make_shell("A=1", "B=2")
    out = io.StringIO()
    run_builtin(shell, Command(args=["echo", "$A"]), True, out, io.StringIO())
    assert out.getvalue() == "1 \n"
    run_builtin(shell, Command(args=["unset", "A"]), True, out, io.StringIO())
    assert shell.env.get("A") is None