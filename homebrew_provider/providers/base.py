import logging
from typing import Optional

from homebrew_provider.model import HomebrewSettings, InstalledState, PackageAction, PackageRequest

log = logging.getLogger(__name__)


class PackageProvider:
    PROVIDER_NAME: str = NotImplemented

    def __init__(self, request: PackageRequest, *, settings: HomebrewSettings):
        self.request = request
        self.settings = settings

    def load_current_state(self) -> InstalledState:
        raise NotImplementedError("load_current_state")

    def candidate_version(self) -> Optional[str]:
        raise NotImplementedError("candidate_version")

    def is_current(self, current: InstalledState) -> bool:
        """
        Whether the candidate version is among the installed versions
        """
        return self.candidate_version() in current.versions

    def install_package(self, name: str, version: Optional[str]) -> None:
        raise NotImplementedError("install_package")

    def upgrade_package(self, name: str, version: Optional[str]) -> None:
        raise NotImplementedError("upgrade_package")

    def remove_package(self, name: str, version: Optional[str]) -> None:
        raise NotImplementedError("remove_package")

    def purge_package(self, name: str, version: Optional[str]) -> None:
        raise NotImplementedError("purge_package")

    def run_action(self, action: PackageAction) -> bool:
        """
        Bring the package in line with action, returning whether anything was run

        Any provider error is raised as-is; the next run is expected to try again
        """
        current = self.load_current_state()
        name = self.request.name
        version = self.request.version

        if action == PackageAction.INSTALL:
            if current.is_installed:
                log.debug("%s already installed at %s", name, current.version)
                return False
            self.install_package(name, version)
        elif action == PackageAction.UPGRADE:
            if current.is_installed and self.is_current(current):
                log.debug("%s already at candidate version %s", name, self.candidate_version())
                return False
            self.upgrade_package(name, version)
        elif action == PackageAction.REMOVE:
            if not current.is_installed:
                return False
            self.remove_package(name, version)
        elif action == PackageAction.PURGE:
            if not current.is_installed:
                return False
            self.purge_package(name, version)
        else:
            raise ValueError(f"Unknown package action: {action}")

        log.info("%s: %s %s", self.PROVIDER_NAME, action.value, self.request)
        return True
