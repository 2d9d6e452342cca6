"""MultiSite 驱动和命令行入口的测试"""

import logging

import pytest

import main
from sitehosts.app import INSTALL, REMOVE, MultiSite
from sitehosts.config import Config
from sitehosts.exceptions import HostsIOError
from sitehosts.hosts_manager import HostsFile
from sitehosts.vhosts import VirtualHostsConfig, find_virtual_host

HOSTS = "127.0.0.1\tlocalhost\r\n# keep me\r\n"


@pytest.fixture
def workspace(tmp_path):
    sites = tmp_path / "sites"
    for name in ("alpha.test", "beta.test", "skip"):
        (sites / name).mkdir(parents=True)
    htdocs = tmp_path / "htdocs"
    htdocs.mkdir()
    hosts = tmp_path / "hosts"
    hosts.write_bytes(HOSTS.encode("utf-8"))
    vhosts = tmp_path / "httpd-vhosts.conf"
    vhosts.write_text("# vhosts\n", encoding="utf-8")
    return tmp_path


def make_config(workspace, **overrides) -> Config:
    values = dict(
        hosts_file_path=str(workspace / "hosts"),
        vhosts_file_path=str(workspace / "httpd-vhosts.conf"),
        sites_dir=str(workspace / "sites"),
        localhost_dir=str(workspace / "htdocs"),
        ignored_sites=["skip"],
    )
    values.update(overrides)
    return Config(**values)


def hosts_text(workspace) -> str:
    return (workspace / "hosts").read_bytes().decode("utf-8")


class TestMultiSite:
    """MultiSite 注册和注销发现的每个站点。"""

    def test_install(self, workspace) -> None:
        report = MultiSite(make_config(workspace)).run(INSTALL)
        assert report.ok
        assert report.succeeded == 4
        assert [site.domain for site in report.sites] == ["alpha.test", "beta.test"]
        assert hosts_text(workspace) == (
            "127.0.0.1\tlocalhost alpha.test beta.test\r\n# keep me\r\n"
        )
        vhosts = VirtualHostsConfig.load(workspace / "httpd-vhosts.conf")
        assert find_virtual_host(vhosts, "localhost") is not None
        assert find_virtual_host(vhosts, "alpha.test") is not None
        assert find_virtual_host(vhosts, "skip") is None

    def test_install_then_remove_restores_hosts(self, workspace) -> None:
        MultiSite(make_config(workspace)).run(INSTALL)
        report = MultiSite(make_config(workspace)).run(REMOVE)
        assert report.ok
        assert hosts_text(workspace) == HOSTS
        vhosts = VirtualHostsConfig.load(workspace / "httpd-vhosts.conf")
        assert [s.directives("ServerName")[0].value for s in vhosts.sections()] == ["localhost"]

    def test_collision_is_logged_and_skipped(self, workspace, caplog) -> None:
        (workspace / "hosts").write_bytes(b"10.0.0.9 alpha.test\r\n")
        with caplog.at_level(logging.WARNING, logger="site-hosts"):
            report = MultiSite(make_config(workspace)).run(INSTALL)
        assert report.failed == 1
        assert report.succeeded == 3
        assert "alpha.test" in caplog.text
        hosts = HostsFile.load(workspace / "hosts")
        assert hosts.find_by_name("alpha.test").address == "10.0.0.9"
        assert hosts.find_by_name("beta.test").address == "127.0.0.1"

    def test_unrenderable_site_names_are_skipped(self, workspace) -> None:
        (workspace / "sites" / "c#.test").mkdir()
        (workspace / "sites" / "my site").mkdir()
        report = MultiSite(make_config(workspace)).run(INSTALL)
        assert report.failed == 2
        assert hosts_text(workspace) == (
            "127.0.0.1\tlocalhost alpha.test beta.test\r\n# keep me\r\n"
        )
        MultiSite(make_config(workspace)).run(REMOVE)
        assert hosts_text(workspace) == HOSTS

    def test_second_install_reports_failures(self, workspace) -> None:
        MultiSite(make_config(workspace)).run(INSTALL)
        report = MultiSite(make_config(workspace)).run(INSTALL)
        assert report.succeeded == 0
        assert report.failed == 4

    def test_remove_unknown_sites(self, workspace) -> None:
        report = MultiSite(make_config(workspace)).run(REMOVE)
        assert report.failed == 4
        assert hosts_text(workspace) == HOSTS

    def test_custom_localhost_ip(self, workspace) -> None:
        MultiSite(make_config(workspace, localhost_ip="127.0.0.2")).run(INSTALL)
        assert hosts_text(workspace).endswith("127.0.0.2\talpha.test beta.test\r\n")

    def test_missing_hosts_file_is_fatal(self, workspace) -> None:
        with pytest.raises(HostsIOError):
            MultiSite(make_config(workspace, hosts_file_path=str(workspace / "nope")))

    def test_invalid_mode(self, workspace) -> None:
        with pytest.raises(ValueError):
            MultiSite(make_config(workspace)).run("upgrade")


class TestMain:
    """main() 将参数和运行结果映射为退出码。"""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("HOSTS_FILE", "VHOSTS_FILE", "SITES_DIR", "LOCALHOST_DIR",
                     "IGNORE_SITES", "LOCALHOST_IP", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

    def args(self, workspace, mode="--install"):
        return [
            mode,
            "--hosts", str(workspace / "hosts"),
            "--vhosts", str(workspace / "httpd-vhosts.conf"),
            "--sites", str(workspace / "sites"),
            "--localhost", str(workspace / "htdocs"),
            "--ignore", "skip",
        ]

    def test_install(self, workspace) -> None:
        assert main.main(self.args(workspace)) == 0
        assert "alpha.test beta.test" in hosts_text(workspace)

    def test_environment_fills_missing_arguments(self, workspace, monkeypatch) -> None:
        monkeypatch.setenv("SITES_DIR", str(workspace / "sites"))
        argv = [a for a in self.args(workspace) if a not in ("--sites", str(workspace / "sites"))]
        assert main.main(argv) == 0
        assert "skip" not in hosts_text(workspace)

    def test_missing_configuration(self, workspace, capsys) -> None:
        assert main.main(["--remove", "--hosts", str(workspace / "hosts")]) == 1
        assert "VHOSTS_FILE" in capsys.readouterr().err

    def test_mode_is_required(self, workspace) -> None:
        with pytest.raises(SystemExit) as info:
            main.main(self.args(workspace, mode="--hosts")[1:])
        assert info.value.code == 2

    def test_modes_are_exclusive(self, workspace) -> None:
        with pytest.raises(SystemExit):
            main.main(["--install", "--remove"] + self.args(workspace)[1:])
