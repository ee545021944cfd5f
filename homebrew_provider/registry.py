import logging
import importlib

from homebrew_provider.errors import ConfigurationError
from homebrew_provider.model import HomebrewSettings, PackageRequest
from homebrew_provider.providers.base import PackageProvider

log = logging.getLogger(__name__)


_Key = tuple[str, str]
ProviderClass = type[PackageProvider]


class ProviderRegistry:
    def __init__(self):
        self._loaded_providers: dict[_Key, ProviderClass] = {}
        self._unloaded_providers: dict[_Key, str] = {}

    @classmethod
    def from_dict(cls, config: dict[str, str]):
        """
        Build a registry from flattened config entries of the form {"<platform>.<resource>": "module.Class"}
        """
        registry = cls()
        for key, providerclass in config.items():
            platform, _, resource = key.rpartition(".")
            if not platform or not resource:
                raise ConfigurationError(f"Provider key {key!r} is not of the form <platform>.<resource>")
            registry.deferred_register(platform, resource, providerclass)

        return registry

    def deferred_register(self, platform: str, resource: str, providerclass: str):
        self._unloaded_providers[(platform, resource)] = providerclass

    def register(self, platform: str, resource: str, provider: ProviderClass):
        log.debug("Registering %s for %s/%s", provider.__name__, platform, resource)
        self._loaded_providers[(platform, resource)] = provider

    def is_registered(self, platform: str, resource: str) -> bool:
        key = (platform, resource)
        return key in self._loaded_providers or key in self._unloaded_providers

    def _load_provider(self, providerclass: str) -> ProviderClass:
        package_name, class_name = providerclass.rsplit(".", maxsplit=1)
        module = importlib.import_module(package_name)
        return getattr(module, class_name)

    def get(self, platform: str, resource: str) -> ProviderClass:
        key = (platform, resource)
        provider = self._loaded_providers.get(key)
        if provider is None:
            if key not in self._unloaded_providers:
                raise LookupError(f"No provider registered for {platform}/{resource}")
            providerclass = self._unloaded_providers.pop(key)
            provider = self._load_provider(providerclass)
            self._loaded_providers[key] = provider
        return provider

    def create(self, platform: str, resource: str, request: PackageRequest, settings: HomebrewSettings) -> PackageProvider:
        return self.get(platform, resource)(request, settings=settings)

    def __str__(self):
        providers: dict[str, str] = {"/".join(key): provider.PROVIDER_NAME for key, provider in self._loaded_providers.items()}
        for key, providerclass in self._unloaded_providers.items():
            providers["/".join(key)] = f"U-{providerclass}"

        return f"<{self.__class__.__name__} providers={providers}>"

    def __repr__(self):
        return str(self)
