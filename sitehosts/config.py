"""
配置管理模块，支持环境变量
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def default_hosts_path() -> str:
    """返回当前平台的 hosts 文件路径"""
    if os.name == "nt":
        windir = os.getenv("windir", r"C:\Windows")
        return os.path.join(windir, "System32", "drivers", "etc", "hosts")
    return "/etc/hosts"


def split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Config:
    """应用配置类，从环境变量加载配置"""

    hosts_file_path: str = field(default_factory=default_hosts_path)
    vhosts_file_path: Optional[str] = None
    sites_dir: Optional[str] = None
    localhost_dir: Optional[str] = None
    ignored_sites: List[str] = field(default_factory=list)
    localhost_ip: str = "127.0.0.1"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """
        从环境变量加载配置

        环境变量说明:
            HOSTS_FILE: hosts 文件路径 (默认: 当前平台的 hosts 文件)
            VHOSTS_FILE: 虚拟主机配置文件路径
            SITES_DIR: 站点目录，每个子目录是一个站点
            LOCALHOST_DIR: localhost 站点根目录
            IGNORE_SITES: 逗号分隔的忽略目录名列表
            LOCALHOST_IP: 站点别名指向的地址 (默认: 127.0.0.1)
            LOG_LEVEL: 日志级别 (默认: INFO)
        """
        return cls(
            hosts_file_path=os.getenv("HOSTS_FILE") or default_hosts_path(),
            vhosts_file_path=os.getenv("VHOSTS_FILE"),
            sites_dir=os.getenv("SITES_DIR"),
            localhost_dir=os.getenv("LOCALHOST_DIR"),
            ignored_sites=split_list(os.getenv("IGNORE_SITES")),
            localhost_ip=os.getenv("LOCALHOST_IP", "127.0.0.1"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper()
        )

    def validate(self) -> None:
        """验证配置是否有效"""
        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.log_level not in valid_log_levels:
            raise ValueError(
                f"无效的 LOG_LEVEL: {self.log_level}. "
                f"必须是以下之一: {', '.join(sorted(valid_log_levels))}"
            )

        missing = [
            name for name, value in (
                ("VHOSTS_FILE", self.vhosts_file_path),
                ("SITES_DIR", self.sites_dir),
                ("LOCALHOST_DIR", self.localhost_dir),
            )
            if not value
        ]
        if missing:
            raise ValueError(f"缺少必需的配置: {', '.join(missing)}")

        if not self.localhost_ip:
            raise ValueError("LOCALHOST_IP 不能为空")
