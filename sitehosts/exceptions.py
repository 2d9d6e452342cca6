"""
Site Hosts 异常定义
"""


class SiteHostsError(Exception):
    """所有 sitehosts 异常的基类"""


class HostsFileError(SiteHostsError):
    """hosts 文件相关错误"""


class HostsIOError(HostsFileError, OSError):
    """无法读取或写入 hosts 文件"""


class AliasExistsError(HostsFileError):
    """主机名已经存在别名"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"主机名已存在别名: {name}")


class AliasNotFoundError(HostsFileError):
    """主机名没有对应的别名"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"主机名没有别名: {name}")


class RecordError(HostsFileError):
    """单条记录相关错误"""


class DuplicateNameError(RecordError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"记录中已包含主机名: {name}")


class NameNotFoundError(RecordError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"主机名不属于此记录: {name}")


class InvalidRecordError(RecordError):
    """记录必须同时拥有 IP 地址和主机名，或者两者都没有"""


class VirtualHostsError(SiteHostsError):
    """虚拟主机配置文件相关错误"""


class VirtualHostsIOError(VirtualHostsError, OSError):
    """无法读取或写入虚拟主机配置文件"""


class VirtualHostsSyntaxError(VirtualHostsError):
    def __init__(self, message: str, line_number: int):
        self.line_number = line_number
        super().__init__(f"第 {line_number} 行: {message}")


class SectionNotFoundError(VirtualHostsError):
    """要移除的段不属于此段"""


class VirtualHostExistsError(VirtualHostsError):
    def __init__(self, server_name: str):
        self.server_name = server_name
        super().__init__(f"VirtualHost 已注册: {server_name}")


class VirtualHostNotFoundError(VirtualHostsError):
    def __init__(self, server_name: str):
        self.server_name = server_name
        super().__init__(f"VirtualHost 未注册: {server_name}")


class SitesDirectoryError(SiteHostsError, OSError):
    """站点目录不存在或无法读取"""
