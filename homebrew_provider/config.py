import logging.config
import getpass
from collections import ChainMap
from typing import Any, Optional
from collections.abc import Iterable
import dataclasses
import os
import pathlib

import tomli

from homebrew_provider.model import HomebrewSettings
from homebrew_provider.providers import homebrew
from homebrew_provider.registry import ProviderRegistry

# an unset XDG_CONFIG_HOME survives expandvars and falls back to ~/.config
CONFIG_DIR = "${XDG_CONFIG_HOME}/homebrew-provider"
LOCAL_CONFIG_PATH = "./homebrew-provider.toml"
CONFIG_FILENAME = "config.toml"
LOGGING_FILENAME = "logging.toml"

BUILTIN_CONFIG = """
homebrew.brew = "brew"
"""

BUILTIN_LOGGING_CONFIG = """
version = 1
disable_existing_loggers = false

[formatters.default]
format = "%(asctime)s.%(msecs)03d:%(levelname)s:%(name)s::%(message)s"
datefmt = "%Y-%m-%d %H:%M:%S"

[handlers.console]
class = "logging.StreamHandler"
level = "INFO"
formatter = "default"
stream = "ext://sys.stderr"

[loggers.root]
level = "INFO"
handlers = ["console"]
"""


def _expand(path: str) -> pathlib.Path:
    expanded = os.path.expandvars(path).replace("${XDG_CONFIG_HOME}", "~/.config")
    return pathlib.Path(expanded).expanduser()


def _config_file(filename: str, builtin: str) -> pathlib.Path:
    """
    Path of a file in the user config directory, written from builtin the first time it is needed
    """
    folder = _expand(CONFIG_DIR)
    folder.mkdir(mode=0o755, parents=True, exist_ok=True)
    path = folder / filename
    if not path.exists():
        path.write_text(builtin)
    return path


def _read_toml(path: pathlib.Path) -> dict[str, Any]:
    with open(path, mode="rb") as f:
        return tomli.load(f)


def setup_logging():
    logging.config.dictConfig(_read_toml(_config_file(LOGGING_FILENAME, BUILTIN_LOGGING_CONFIG)))


def _flatten(config: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in config.items():
        path = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{path}."))
        else:
            flat[path] = value
    return flat


def _merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """
    Merge configs by their dotted keys, later configs winning
    """
    return dict(ChainMap(*[_flatten(config) for config in reversed(configs)]))


def _load_config(configpaths: Iterable[str] = ()) -> dict[str, Any]:
    paths = [_config_file(CONFIG_FILENAME, BUILTIN_CONFIG)]
    local = _expand(LOCAL_CONFIG_PATH)
    if local.exists():
        paths.append(local)
    paths.extend(_expand(path) for path in configpaths)

    return _merge_configs(tomli.loads(BUILTIN_CONFIG), *[_read_toml(path) for path in paths])


def default_owner() -> str:
    """
    The user brew runs as when no owner is configured: whoever invoked sudo, otherwise the current user
    """
    return os.environ.get("SUDO_USER") or getpass.getuser()


def _settings_from_config(config: dict[str, Any]) -> HomebrewSettings:
    aliases_dir: Optional[str] = config.get("homebrew.aliases_dir")
    return HomebrewSettings(
        owner=config.get("homebrew.owner") or default_owner(),
        brew=config.get("homebrew.brew", "brew"),
        aliases_dir=os.path.expanduser(aliases_dir) if aliases_dir else None,
    )


@dataclasses.dataclass
class Config:
    homebrew: HomebrewSettings
    providers: ProviderRegistry

    @classmethod
    def from_dict(cls, merged_config: dict[str, Any]) -> "Config":
        provider_config = {k.removeprefix("provider."): v for k, v in merged_config.items() if k.startswith("provider.")}
        providers = ProviderRegistry.from_dict(provider_config)
        # host supplied providers take precedence over ours
        homebrew.register(providers)
        return cls(
            homebrew=_settings_from_config(merged_config),
            providers=providers,
        )

    @classmethod
    def load_from_files(cls, configpaths: Iterable[str] = ()) -> "Config":
        return cls.from_dict(_load_config(configpaths))
