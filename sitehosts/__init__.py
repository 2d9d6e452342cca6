"""
Site Hosts - 将本地站点目录注册到 hosts 文件和 Apache 虚拟主机配置
"""

__version__ = "1.0.0"
__author__ = "Site Hosts Project"

from sitehosts.app import MultiSite
from sitehosts.config import Config
from sitehosts.hosts_manager import HostsFile
from sitehosts.models import Record, Site

__all__ = ["MultiSite", "Config", "HostsFile", "Record", "Site"]
