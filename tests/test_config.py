from pathlib import Path
import pytest
from config import settings
from config.settings import ConfigError, resolve_store_path, resolve_log_level


def test_env_var_overrides_default(tmp_path):
    assert resolve_store_path({'ROOSTER_FILE': str(tmp_path / 'x')}, Path('/home/me')) == tmp_path / 'x'


def test_default_is_dotfile_in_home():
    assert resolve_store_path({}, Path('/home/me')) == Path('/home/me/.passwords.rooster')


def test_no_home_and_no_env_is_an_error():
    with pytest.raises(ConfigError):
        resolve_store_path({}, None)


def test_log_level():
    assert resolve_log_level({}) == settings.LOG_LEVEL
    assert resolve_log_level({'ROOSTER_LOG_LEVEL': 'debug'}) == 'DEBUG'


def test_package_reexports_settings():
    import config
    assert config.SALT_LENGTH == settings.SALT_LENGTH == 32
