"""
Homebrew package provider

Installs, upgrades and removes formulas by running brew as the Homebrew owner
"""
import logging
import shlex
from typing import Optional

from homebrew_provider.formula import Formula, FormulaDatabase
from homebrew_provider.model import HomebrewSettings, InstalledState, PackageRequest
from homebrew_provider.providers.base import PackageProvider
from homebrew_provider.registry import ProviderRegistry
from homebrew_provider.runner import CommandRunner, Runner

log = logging.getLogger(__name__)

PLATFORMS = ("mac_os_x", "mac_os_x_server")
RESOURCE = "package"
FORCE_OPTION = "--force"


def version_arg(version: Optional[str]) -> Optional[str]:
    if not version:
        return None
    return version if version.startswith("-") else f"-v={version}"


def split_options(options: Optional[str]) -> list[str]:
    if not options:
        return []
    return shlex.split(options)


class HomebrewPackageProvider(PackageProvider):
    PROVIDER_NAME = "package.homebrew"

    def __init__(self, request: PackageRequest, *, settings: HomebrewSettings, runner: Optional[CommandRunner] = None):
        super().__init__(request, settings=settings)
        self.runner = runner or Runner
        self.formulas = FormulaDatabase(settings, self.runner)
        self._current_formula: Optional[Formula] = None

    def load_current_state(self) -> InstalledState:
        formula = self._formula()
        return InstalledState(name=self.request.name, versions=formula.installed_versions)

    def candidate_version(self) -> Optional[str]:
        return self._formula().version

    def is_current(self, current: InstalledState) -> bool:
        return self._formula().pkg_version in current.versions

    def install_package(self, name: str, version: Optional[str]) -> None:
        self.brew("install", *split_options(self.request.options), name, version_arg(version))

    def upgrade_package(self, name: str, version: Optional[str]) -> None:
        self.brew("upgrade", name, version_arg(version))

    def remove_package(self, name: str, version: Optional[str]) -> None:
        self._uninstall(name, version, split_options(self.request.options))

    def purge_package(self, name: str, version: Optional[str]) -> None:
        # Homebrew has no notion of purging, so remove with --force
        options = split_options(self.request.options)
        if FORCE_OPTION not in options:
            options.append(FORCE_OPTION)
        self._uninstall(name, version, options)

    def _uninstall(self, name: str, version: Optional[str], options: list[str]) -> None:
        self.brew("uninstall", *options, name, version_arg(version))

    def _formula(self) -> Formula:
        """
        The formula for the requested package, looked up once until brew changes something
        """
        if self._current_formula is None:
            self._current_formula = self.formulas.factory(self.request.name)
        return self._current_formula

    def brew(self, *args: Optional[str]) -> str:
        command = [self.settings.brew, *[arg for arg in args if arg]]
        self._current_formula = None
        return self.runner.run(command, user=self.settings.owner)


def register(registry: ProviderRegistry) -> None:
    """
    Register the homebrew provider for packages on macOS

    Nothing is registered if the host already has a package provider for macOS
    """
    if registry.is_registered(PLATFORMS[0], RESOURCE):
        log.debug("Package provider already registered for %s, not registering homebrew", PLATFORMS[0])
        return

    for platform in PLATFORMS:
        registry.register(platform, RESOURCE, HomebrewPackageProvider)
