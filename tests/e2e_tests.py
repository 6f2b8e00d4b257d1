"""
This is a collection of simple end-to-end tests. These should
validate the correctness of any interaction loop that the user
can initiate.
"""
import builtins

import pytest

from .context import BTreeMapShell, MetaCommandResult, parse_args_and_start, run_file


# utils


def run(shell: BTreeMapShell, command: str) -> list:
    """
    Utility to run command, check success and return outputs
    """
    resp = shell.handle_input(command)
    assert resp.success, f"{command} failed with {resp.error_message}"
    return shell.get_pipe().read_all()


@pytest.fixture
def shell():
    return BTreeMapShell()


# tests


def test_insert_get_put_delete(shell):
    assert run(shell, "insert 1 'a'") == ["true"]
    assert run(shell, "insert 1 'b'") == ["false"]
    assert run(shell, "get 1") == ["'a'"]
    assert run(shell, "put 1 'c'") == ["'a'"]
    assert run(shell, "put 2 'd'") == ["null"]
    assert run(shell, "get 1") == ["'c'"]
    assert run(shell, "delete 1") == ["1:'c'"]
    assert run(shell, "delete 1") == ["null"]
    assert run(shell, "get 1") == ["null"]


def test_multiple_statements(shell):
    assert run(shell, "insert 1 'a'; insert 2 'b'; get 2") == ["true", "true", "'b'"]


def test_many_keys_keep_tree_valid(shell):
    for key in range(100):
        run(shell, f"insert {key} {key * 2}")
    for key in range(0, 100, 3):
        assert run(shell, f"delete {key}") == [f"{key}:{key * 2}"]
    assert run(shell, ".validate") == ["validation succeeded"]
    assert run(shell, "get 4") == ["8"]
    assert run(shell, "get 3") == ["null"]


def test_parse_failure(shell):
    resp = shell.handle_input("insert 1")
    assert not resp.success
    assert "parse failed" in resp.error_message
    assert not shell.get_pipe().has_msgs()


def test_incomparable_keys(shell):
    resp = shell.handle_input("insert 1 'a'; insert 'x' 'b'; get 1")
    assert not resp.success
    assert "not comparable" in resp.error_message
    # statements before the failure were executed; statements after were not
    assert shell.get_pipe().read_all() == ["true"]
    assert run(shell, "get 1") == ["'a'"]


def test_meta_commands(shell, capsys):
    run(shell, "insert 1 'a'; insert 2 'b'; insert 3 'c'; insert 4 'd'")

    resp = shell.handle_input(".btree")
    assert resp.success
    out = capsys.readouterr().out
    assert "Printing tree" in out
    assert "4:d" in out

    assert run(shell, ".validate") == ["validation succeeded"]

    assert shell.handle_input(".help").success

    run(shell, ".reset")
    assert shell.tree.root.size() == 0
    assert run(shell, "get 1") == ["null"]

    resp = shell.handle_input(".quit")
    assert resp.success and resp.status == MetaCommandResult.Exit

    resp = shell.handle_input(".nope")
    assert not resp.success and resp.status == MetaCommandResult.UnrecognizedCommand

    resp = shell.handle_input(".btree foo")
    assert not resp.success and resp.status == MetaCommandResult.InvalidArgument


def test_validate_reports_corruption(shell):
    run(shell, "insert 1 'a'; insert 2 'b'")
    shell.tree.root.entries.reverse()
    resp = shell.handle_input(".validate")
    assert not resp.success
    assert "validation failed" in resp.error_message


def test_minimum_degree():
    shell = BTreeMapShell(t=3)
    assert shell.tree.t == 3
    run(shell, ".reset")
    assert shell.tree.t == 3

    with pytest.raises(ValueError):
        BTreeMapShell(t=1)


def test_run_file(tmp_path, capsys):
    path = tmp_path / "commands.txt"
    path.write_text("insert 1 'a';\nput 1 'b';\nget 1;\ndelete 1\n")
    resp = run_file(str(path))
    assert resp.success
    out = capsys.readouterr().out.splitlines()
    assert out == ["true", "'a'", "'b'", "1:'b'"]


def test_run_file_missing(tmp_path):
    resp = run_file(str(tmp_path / "missing.txt"))
    assert not resp.success


def test_parse_args(tmp_path, capsys):
    path = tmp_path / "commands.txt"
    path.write_text("insert 1 2; get 1")
    assert parse_args_and_start(["file", str(path), "3"]) == 0
    assert parse_args_and_start([]) == 1
    assert parse_args_and_start(["bogus"]) == 1
    assert parse_args_and_start(["file"]) == 1
    # invalid minimum degree
    assert parse_args_and_start(["repl", "1"]) == 1


def test_repl(monkeypatch, capsys):
    from btreemap.interface import repl

    lines = iter(["insert 1 'a'", "get 1", "get", ".quit", "get 1"])

    def fake_input(prompt=""):
        return next(lines)

    monkeypatch.setattr(builtins, "input", fake_input)
    repl()
    out = capsys.readouterr().out
    assert "true" in out
    assert "'a'" in out
    assert "Command execution failed" in out
    assert "goodbye" in out
    # statements after .quit are not read
    assert next(lines) == "get 1"
