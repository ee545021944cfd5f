from collections.abc import Sequence
from typing import Optional


class ProviderError(Exception):
    pass


class SubprocessFailure(ProviderError):
    def __init__(self, command: Sequence[str], returncode: Optional[int], stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        message = f"`{' '.join(self.command)}` exited with {returncode}"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class UserLookupFailure(ProviderError):
    def __init__(self, user: str):
        self.user = user
        super().__init__(f"No such user: {user}")


class FormulaResolutionFailure(ProviderError):
    pass


class LibraryLoadFailure(ProviderError):
    pass


class ConfigurationError(ProviderError):
    pass
