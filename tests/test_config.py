"""环境变量配置的测试"""

import pytest

from sitehosts.config import Config, default_hosts_path, split_list

ENV_VARS = (
    "HOSTS_FILE", "VHOSTS_FILE", "SITES_DIR", "LOCALHOST_DIR",
    "IGNORE_SITES", "LOCALHOST_IP", "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def valid_config(**overrides) -> Config:
    values = dict(vhosts_file_path="vhosts.conf", sites_dir="sites", localhost_dir="htdocs")
    values.update(overrides)
    return Config(**values)


class TestFromEnv:
    """Config.from_env 从环境变量读取所有配置。"""

    def test_defaults(self, clean_env) -> None:
        config = Config.from_env()
        assert config.hosts_file_path == default_hosts_path()
        assert config.localhost_ip == "127.0.0.1"
        assert config.log_level == "INFO"
        assert config.ignored_sites == []

    def test_values(self, clean_env) -> None:
        clean_env.setenv("HOSTS_FILE", "/tmp/hosts")
        clean_env.setenv("VHOSTS_FILE", "/tmp/vhosts.conf")
        clean_env.setenv("SITES_DIR", "/srv/sites")
        clean_env.setenv("LOCALHOST_DIR", "/srv/htdocs")
        clean_env.setenv("IGNORE_SITES", "a, b,,c")
        clean_env.setenv("LOCALHOST_IP", "127.0.0.2")
        clean_env.setenv("LOG_LEVEL", "debug")
        config = Config.from_env()
        assert config.hosts_file_path == "/tmp/hosts"
        assert config.vhosts_file_path == "/tmp/vhosts.conf"
        assert config.sites_dir == "/srv/sites"
        assert config.localhost_dir == "/srv/htdocs"
        assert config.ignored_sites == ["a", "b", "c"]
        assert config.localhost_ip == "127.0.0.2"
        assert config.log_level == "DEBUG"


class TestValidate:
    """Config.validate 拒绝不完整或无效的配置。"""

    def test_valid(self) -> None:
        valid_config().validate()

    def test_bad_log_level(self) -> None:
        with pytest.raises(ValueError, match="LOG_LEVEL"):
            valid_config(log_level="LOUD").validate()

    def test_missing_paths(self) -> None:
        with pytest.raises(ValueError, match="SITES_DIR"):
            valid_config(sites_dir=None).validate()

    def test_empty_localhost_ip(self) -> None:
        with pytest.raises(ValueError):
            valid_config(localhost_ip="").validate()


def test_split_list() -> None:
    assert split_list(None) == []
    assert split_list(" x ,y") == ["x", "y"]
