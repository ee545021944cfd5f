from typing import Optional
from collections.abc import Iterable

import click

from homebrew_provider.config import Config, setup_logging
from homebrew_provider.errors import ProviderError
from homebrew_provider.model import PackageAction, PackageRequest
from homebrew_provider.providers.base import PackageProvider
from homebrew_provider.providers.homebrew import RESOURCE


class _Host:
    def __init__(self, config: Config, platform: str):
        self.config = config
        self.platform = platform

    def provider(self, request: PackageRequest) -> PackageProvider:
        return self.config.providers.create(self.platform, RESOURCE, request, self.config.homebrew)


@click.group()
@click.option("--config", "configpaths", multiple=True, type=click.Path(exists=True, dir_okay=False), help="Extra config file, may be repeated")
@click.option("--platform", default="mac_os_x", show_default=True)
@click.pass_context
def main(ctx, configpaths: Iterable[str], platform: str):
    setup_logging()
    try:
        config = Config.load_from_files(configpaths)
    except ProviderError as e:
        raise click.ClickException(str(e)) from e
    ctx.obj = _Host(config, platform)


@main.command()
@click.argument("NAME")
@click.pass_obj
def status(host: _Host, name: str):
    """
    Show the installed and candidate versions of NAME
    """
    provider = host.provider(PackageRequest(name=name))
    try:
        current = provider.load_current_state()
        candidate = provider.candidate_version()
    except ProviderError as e:
        raise click.ClickException(str(e)) from e

    print(f"installed: {current.version or '-'}")
    print(f"candidate: {candidate or '-'}")


def _run_action(host: _Host, action: PackageAction, name: str, version: Optional[str], options: Optional[str]):
    request = PackageRequest(name=name, version=version, options=options)
    try:
        changed = host.provider(request).run_action(action)
    except ProviderError as e:
        raise click.ClickException(str(e)) from e

    print(f"{action.value} {name}: {'changed' if changed else 'unchanged'}")


def _action_command(action: PackageAction, doc: str):
    @click.argument("NAME")
    @click.option("--version", default=None, help="Version argument passed to brew")
    @click.option("--options", default=None, help="Extra flags passed to brew")
    @click.pass_obj
    def command(host: _Host, name: str, version: Optional[str], options: Optional[str]):
        _run_action(host, action, name, version, options)

    command.__doc__ = doc
    return main.command(name=action.value)(command)


install = _action_command(PackageAction.INSTALL, "Install NAME unless it is already installed")
upgrade = _action_command(PackageAction.UPGRADE, "Upgrade NAME to the candidate version")
remove = _action_command(PackageAction.REMOVE, "Uninstall NAME if it is installed")
purge = _action_command(PackageAction.PURGE, "Uninstall NAME with --force if it is installed")


@main.command()
@click.pass_obj
def providers(host: _Host):
    """
    Show the registered package providers
    """
    print(host.config.providers)


@main.command(name="config")
@click.pass_obj
def print_config(host: _Host):
    """
    Show the loaded configuration
    """
    print(host.config)


if __name__ == "__main__":
    main()
