"""
Site Hosts 主应用模块
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import List

from sitehosts.config import Config
from sitehosts.exceptions import SiteHostsError, VirtualHostExistsError
from sitehosts.hosts_manager import HostsFile
from sitehosts.models import Site
from sitehosts.sites import discover_sites
from sitehosts.vhosts import VirtualHostsConfig, add_virtual_host, remove_virtual_host

INSTALL = "install"
REMOVE = "remove"

LOCALHOST_NAME = "localhost"


@dataclass
class RunReport:
    """一次运行的结果统计"""

    mode: str
    sites: List[Site] = field(default_factory=list)
    succeeded: int = 0
    failed: int = 0

    @property
    def ok(self) -> bool:
        return self.failed == 0


class MultiSite:
    """
    主应用控制器，协调所有组件

    管理一次注册/注销流程：
    - 读取 hosts 文件和虚拟主机配置文件
    - 发现站点目录下的所有站点
    - 为每个站点添加或移除 hosts 别名和 VirtualHost 段
    - 写回两个文件
    """

    def __init__(self, config: Config):
        """
        初始化应用并读取两个配置文件

        参数:
            config: 应用配置

        异常:
            ValueError: 如果配置无效
            HostsIOError: 如果无法读取 hosts 文件
            VirtualHostsError: 如果无法读取或解析虚拟主机配置文件
        """
        self.config = config
        self.config.validate()

        self.logger = self._setup_logging()

        self.logger.info("正在读取配置文件...")
        try:
            self.hosts = HostsFile.load(config.hosts_file_path, logger=self.logger)
            self.logger.info(f"  Hosts 文件: {config.hosts_file_path}")
            self.vhosts = VirtualHostsConfig.load(config.vhosts_file_path)
            self.logger.info(f"  虚拟主机配置文件: {config.vhosts_file_path}")
        except SiteHostsError as e:
            self.logger.error(f"读取配置文件失败: {e}")
            raise

    def _setup_logging(self) -> logging.Logger:
        """
        配置日志系统

        返回:
            配置好的日志记录器实例
        """
        logger = logging.getLogger('site-hosts')
        logger.setLevel(self.config.log_level)

        # 避免重复的处理器
        if logger.handlers:
            return logger

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(self.config.log_level)

        # 格式: 时间戳 - 名称 - 级别 - 消息
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)
        return logger

    def _attempt(self, report: RunReport, site: str, target: str, action, *args) -> None:
        # 单个站点失败不影响其他站点
        try:
            action(*args)
        except SiteHostsError as e:
            report.failed += 1
            self.logger.warning(f"  {site}: {target}: {e}")
        else:
            report.succeeded += 1
            self.logger.info(f"  {site}: {target}: 完成")

    def install(self, sites: List[Site]) -> RunReport:
        """
        注册所有站点

        先注册 localhost 的 VirtualHost，再为每个站点添加 hosts 别名
        和 VirtualHost 段。
        """
        report = RunReport(mode=INSTALL, sites=list(sites))

        try:
            add_virtual_host(
                self.vhosts, LOCALHOST_NAME, self.config.localhost_dir,
                describe_directory=False
            )
            self.logger.info("已添加 localhost VirtualHost")
        except VirtualHostExistsError:
            self.logger.info("localhost VirtualHost 已存在")

        self.logger.info(f"正在注册 {len(sites)} 个站点:")
        for site in sites:
            self._attempt(report, site.domain, "Hosts 文件",
                          self.hosts.add_alias, self.config.localhost_ip, site.domain)
            self._attempt(report, site.domain, "虚拟主机配置文件",
                          add_virtual_host, self.vhosts, site.domain, site.path)

        return report

    def uninstall(self, sites: List[Site]) -> RunReport:
        """注销所有站点"""
        report = RunReport(mode=REMOVE, sites=list(sites))

        self.logger.info(f"正在注销 {len(sites)} 个站点:")
        for site in sites:
            self._attempt(report, site.domain, "Hosts 文件",
                          self.hosts.remove_alias, site.domain)
            self._attempt(report, site.domain, "虚拟主机配置文件",
                          remove_virtual_host, self.vhosts, site.domain)

        return report

    def save(self) -> None:
        """
        写回 hosts 文件和虚拟主机配置文件

        异常:
            HostsIOError: 如果无法写入 hosts 文件
            VirtualHostsIOError: 如果无法写入虚拟主机配置文件
        """
        self.logger.info("正在写入更改...")
        try:
            self.hosts.save()
            self.logger.info("  Hosts 文件: 完成")
            self.vhosts.save()
            self.logger.info("  虚拟主机配置文件: 完成")
        except SiteHostsError as e:
            self.logger.critical(f"写入更改失败: {e}")
            raise

    def run(self, mode: str) -> RunReport:
        """
        执行一次完整的注册或注销流程

        参数:
            mode: INSTALL 或 REMOVE

        返回:
            运行结果统计
        """
        if mode not in (INSTALL, REMOVE):
            raise ValueError(f"无效的模式: {mode}")

        sites = discover_sites(self.config.sites_dir, self.config.ignored_sites)

        if mode == INSTALL:
            report = self.install(sites)
        else:
            report = self.uninstall(sites)

        self.save()
        self.logger.info(
            f"完成: {report.succeeded} 项成功, {report.failed} 项失败"
        )
        return report
