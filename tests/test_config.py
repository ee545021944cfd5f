import os
import pathlib
import tempfile
import unittest
from unittest import mock

from homebrew_provider.config import Config, _merge_configs, default_owner, setup_logging
from homebrew_provider.errors import ConfigurationError
from homebrew_provider.providers.homebrew import HomebrewPackageProvider


class TestConfig(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = pathlib.Path(self._tmp.name)
        self._env = mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": str(self.root / "xdg")})
        self._env.start()

    def tearDown(self):
        self._env.stop()
        self._tmp.cleanup()

    def test_merge_later_wins(self):
        merged = _merge_configs(
            {"homebrew": {"brew": "brew", "owner": "a"}},
            {"homebrew": {"owner": "b"}, "provider": {"mac_os_x": {"package": "x.Y"}}},
        )
        assert merged == {"homebrew.brew": "brew", "homebrew.owner": "b", "provider.mac_os_x.package": "x.Y"}

    def test_default_owner_prefers_sudo_user(self):
        with mock.patch.dict(os.environ, {"SUDO_USER": "admin"}):
            assert default_owner() == "admin"

    def test_load_from_files(self):
        user_config = self.root / "extra.toml"
        user_config.write_text('[homebrew]\nowner = "admin"\nbrew = "/opt/homebrew/bin/brew"\naliases_dir = "/opt/homebrew/Library/Aliases"\n')

        config = Config.load_from_files([str(user_config)])

        assert (self.root / "xdg" / "homebrew-provider" / "config.toml").exists()
        assert config.homebrew.owner == "admin"
        assert config.homebrew.brew == "/opt/homebrew/bin/brew"
        assert config.homebrew.aliases_dir == "/opt/homebrew/Library/Aliases"
        assert config.providers.get("mac_os_x", "package") is HomebrewPackageProvider

    def test_setup_logging_writes_default(self):
        with mock.patch("homebrew_provider.config.logging.config.dictConfig") as dict_config:
            setup_logging()
        assert (self.root / "xdg" / "homebrew-provider" / "logging.toml").exists()
        assert dict_config.call_args.args[0]["version"] == 1

    def test_malformed_provider_key(self):
        with self.assertRaises(ConfigurationError):
            Config.from_dict({"homebrew.owner": "admin", "provider.foo": "x"})

    def test_configured_provider_takes_precedence(self):
        config = Config.from_dict({"homebrew.owner": "admin", "provider.mac_os_x.package": "somewhere.Else"})
        assert config.providers.is_registered("mac_os_x", "package")
        assert not config.providers.is_registered("mac_os_x_server", "package")
        assert "U-somewhere.Else" in str(config.providers)


if __name__ == "__main__":
    unittest.main()
