import json
import logging
import os
import pwd
import subprocess
from collections.abc import Sequence

from homebrew_provider.errors import SubprocessFailure, UserLookupFailure
from homebrew_provider.model import ExecutionContext

log = logging.getLogger(__name__)


def execution_context(user: str) -> ExecutionContext:
    try:
        entry = pwd.getpwnam(user)
    except KeyError:
        raise UserLookupFailure(user) from None

    return ExecutionContext(
        user=user,
        uid=entry.pw_uid,
        home=entry.pw_dir,
        environment={"HOME": entry.pw_dir},
    )


class CommandRunner:
    def run(self, command: Sequence[str], *, user: str) -> str:
        """
        Run command as user with HOME pointing at that user's home directory

        Any failure to run the command, including a non-zero exit, raises SubprocessFailure
        """
        context = execution_context(user)
        env = {**os.environ, **context.environment}
        # only switch users when we have to, since that needs privileges
        run_as = None if context.uid == os.geteuid() else context.user

        log.debug("Executing `%s` as %s", " ".join(command), context.user)
        try:
            result = subprocess.run(command, capture_output=True, encoding="utf-8", env=env, user=run_as)
        except OSError as e:
            raise SubprocessFailure(command, None, str(e)) from e

        if result.returncode != 0:
            raise SubprocessFailure(command, result.returncode, result.stderr)
        return result.stdout

    def json(self, command: Sequence[str], *, user: str):
        return json.loads(self.run(command, user=user))


Runner = CommandRunner()
