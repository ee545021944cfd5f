import os
import subprocess
import unittest
from types import SimpleNamespace
from unittest import mock

from homebrew_provider.errors import SubprocessFailure, UserLookupFailure
from homebrew_provider.runner import CommandRunner, execution_context

OWNER = SimpleNamespace(pw_name="brewer", pw_uid=os.geteuid() + 1, pw_dir="/Users/brewer")


def _completed(command, returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(command, returncode, stdout=stdout, stderr=stderr)


@mock.patch("homebrew_provider.runner.pwd.getpwnam", return_value=OWNER)
class TestCommandRunner(unittest.TestCase):
    def test_execution_context(self, getpwnam):
        context = execution_context("brewer")
        getpwnam.assert_called_once_with("brewer")
        assert context.home == "/Users/brewer"
        assert context.environment == {"HOME": "/Users/brewer"}

    def test_unknown_user(self, getpwnam):
        getpwnam.side_effect = KeyError("getpwnam(): name not found: 'nobody-here'")
        with self.assertRaises(UserLookupFailure) as raised:
            CommandRunner().run(["brew", "install", "git"], user="nobody-here")
        assert raised.exception.user == "nobody-here"

    def test_runs_as_owner_with_home(self, getpwnam):
        with mock.patch("homebrew_provider.runner.subprocess.run", return_value=_completed([], stdout="ok\n")) as run:
            output = CommandRunner().run(["brew", "install", "git"], user="brewer")

        assert output == "ok\n"
        run.assert_called_once()
        args, kwargs = run.call_args
        assert args[0] == ["brew", "install", "git"]
        assert kwargs["user"] == "brewer"
        assert kwargs["env"]["HOME"] == "/Users/brewer"

    def test_same_user_does_not_switch(self, getpwnam):
        getpwnam.return_value = SimpleNamespace(pw_name="me", pw_uid=os.geteuid(), pw_dir="/Users/me")
        with mock.patch("homebrew_provider.runner.subprocess.run", return_value=_completed([])) as run:
            CommandRunner().run(["brew", "--prefix"], user="me")
        assert run.call_args.kwargs["user"] is None

    def test_nonzero_exit(self, getpwnam):
        failed = _completed([], returncode=1, stderr="Error: No available formula with the name \"gti\".\n")
        with mock.patch("homebrew_provider.runner.subprocess.run", return_value=failed) as run:
            with self.assertRaises(SubprocessFailure) as raised:
                CommandRunner().run(["brew", "install", "gti"], user="brewer")

        assert run.call_count == 1
        assert raised.exception.returncode == 1
        assert raised.exception.command == ["brew", "install", "gti"]
        assert "No available formula" in str(raised.exception)

    def test_missing_binary(self, getpwnam):
        with mock.patch("homebrew_provider.runner.subprocess.run", side_effect=FileNotFoundError(2, "No such file or directory")):
            with self.assertRaises(SubprocessFailure) as raised:
                CommandRunner().run(["brew", "--prefix"], user="brewer")
        assert raised.exception.returncode is None

    def test_json(self, getpwnam):
        with mock.patch("homebrew_provider.runner.subprocess.run", return_value=_completed([], stdout='{"formulae": []}')):
            assert CommandRunner().json(["brew", "info", "--json=v2", "git"], user="brewer") == {"formulae": []}


if __name__ == "__main__":
    unittest.main()
