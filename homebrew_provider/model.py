"""
Models for the values passed between the host and a package provider
"""
import enum
import dataclasses
from typing import Optional


class PackageAction(enum.Enum):
    INSTALL = "install"
    UPGRADE = "upgrade"
    REMOVE = "remove"
    PURGE = "purge"


@dataclasses.dataclass(frozen=True)
class PackageRequest:
    name: str
    version: Optional[str] = None
    options: Optional[str] = None

    def __str__(self):
        version = "" if self.version is None else f" v={self.version}"
        options = "" if not self.options else f" o={self.options!r}"
        return f"<PackageRequest.{self.name}{version}{options}>"

    __repr__ = __str__


@dataclasses.dataclass(frozen=True)
class InstalledState:
    name: str
    versions: tuple[str, ...] = ()

    @property
    def is_installed(self) -> bool:
        return bool(self.versions)

    @property
    def version(self) -> Optional[str]:
        if not self.versions:
            return None
        return " ".join(self.versions)

    def __str__(self):
        return f"<InstalledState.{self.name} versions={list(self.versions)}>"

    __repr__ = __str__


@dataclasses.dataclass(frozen=True)
class ExecutionContext:
    user: str
    uid: int
    home: str
    environment: dict[str, str] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class HomebrewSettings:
    owner: str
    brew: str = "brew"
    aliases_dir: Optional[str] = None
