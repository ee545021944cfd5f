"""
Homebrew formula lookups

Everything here goes through documented brew subcommands (`brew --prefix`, `brew info --json=v2`)
and the alias symlinks in the Homebrew library, rather than loading Homebrew's own ruby code.
"""
import dataclasses
import json
import logging
import os
from typing import Optional

from more_itertools import one, unique_everseen

from homebrew_provider.errors import FormulaResolutionFailure, LibraryLoadFailure, SubprocessFailure
from homebrew_provider.model import HomebrewSettings
from homebrew_provider.runner import CommandRunner, Runner

log = logging.getLogger(__name__)

FORMULA_EXTENSION = ".rb"


@dataclasses.dataclass(frozen=True)
class Formula:
    name: str
    full_name: str
    aliases: tuple[str, ...] = ()
    stable_version: Optional[str] = None
    head_version: Optional[str] = None
    revision: int = 0
    installed_versions: tuple[str, ...] = ()

    @classmethod
    def from_info(cls, info: dict) -> "Formula":
        versions = info.get("versions") or {}
        installed = info.get("installed") or []
        return cls(
            name=info["name"],
            full_name=info.get("full_name") or info["name"],
            aliases=tuple(info.get("aliases") or ()),
            stable_version=versions.get("stable"),
            head_version=versions.get("head"),
            revision=info.get("revision") or 0,
            installed_versions=tuple(unique_everseen(entry["version"] for entry in installed)),
        )

    @property
    def version(self) -> Optional[str]:
        """
        The version brew would install: the stable release if there is one, otherwise the formula's default
        """
        if self.stable_version:
            return self.stable_version
        return self.head_version

    @property
    def pkg_version(self) -> Optional[str]:
        """
        The version as brew names the installed keg, with the formula revision appended when there is one
        """
        if self.version and self.revision:
            return f"{self.version}_{self.revision}"
        return self.version


class FormulaDatabase:
    def __init__(self, settings: HomebrewSettings, runner: CommandRunner = Runner):
        self.settings = settings
        self.runner = runner

    def _brew(self, *args: str) -> str:
        return self.runner.run([self.settings.brew, *args], user=self.settings.owner)

    def library_path(self) -> str:
        try:
            prefix = self._brew("--prefix").strip()
        except SubprocessFailure as e:
            raise LibraryLoadFailure(f"Unable to locate the Homebrew prefix: {e}") from e

        libpath = os.path.join(prefix, "Library")
        if not os.path.isdir(libpath):
            raise LibraryLoadFailure(f"Homebrew library not found at {libpath}")
        return libpath

    def aliases_path(self) -> str:
        if self.settings.aliases_dir:
            return self.settings.aliases_dir
        return os.path.join(self.library_path(), "Aliases")

    def _info(self, name: str) -> dict:
        command = [self.settings.brew, "info", "--json=v2", "--formula", name]
        try:
            info = self.runner.json(command, user=self.settings.owner)
        except json.JSONDecodeError as e:
            raise LibraryLoadFailure(f"Unreadable output from `{' '.join(command)}`") from e
        except SubprocessFailure as e:
            raise FormulaResolutionFailure(f"No formula found for {name!r}: {e}") from e

        too_short = FormulaResolutionFailure(f"No formula found for {name!r}")
        too_long = FormulaResolutionFailure(f"Ambiguous formula name {name!r}")
        return one(info.get("formulae") or [], too_short=too_short, too_long=too_long)

    def canonical_name(self, name: str) -> str:
        info = self._info(name)
        return info.get("full_name") or info["name"]

    def alias_target(self, name: str) -> Optional[str]:
        """
        The formula name an alias symlink points at, or None if name is not an alias
        """
        path = self.aliases_path()
        if not os.path.isdir(path):
            log.debug("No alias directory at %s", path)
            return None
        if name not in os.listdir(path):
            return None

        alias_path = os.path.join(path, name)
        try:
            target = os.readlink(alias_path)
        except OSError as e:
            raise FormulaResolutionFailure(f"Unable to read alias {alias_path}: {e}") from e

        formula_path = os.path.normpath(os.path.join(path, target))
        if not os.path.exists(formula_path):
            raise FormulaResolutionFailure(f"Alias {alias_path} points at missing formula {formula_path}")

        formula_name = os.path.basename(formula_path).removesuffix(FORMULA_EXTENSION)
        log.debug("Resolved alias '%s' to formula '%s'", name, formula_name)
        return formula_name

    def resolved_package_name(self, name: str) -> str:
        # brew info resolves non-alias and tap names on its own
        return self.alias_target(name) or self.canonical_name(name)

    def factory(self, name: str) -> Formula:
        # for a non-alias the info queried under the requested name is already the canonical formula
        return Formula.from_info(self._info(self.alias_target(name) or name))
