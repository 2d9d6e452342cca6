"""
Hosts 文件管理模块，支持原子性写入
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterator, List, Optional, Union

from sitehosts.exceptions import (
    AliasExistsError,
    AliasNotFoundError,
    HostsIOError,
)
from sitehosts.models import Record

ENCODING = "utf-8"


class HostsFile:
    """
    hosts 文件的内存模型

    逐行保存文件中的所有记录（包括空行和注释行），保证未修改的
    条目在保存后保持原样。同一主机名（不区分大小写）在整个文件中
    最多出现在一条记录里。
    """

    def __init__(
        self,
        path: Union[str, Path],
        records: Optional[List[Record]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        参数:
            path: hosts 文件路径，save() 写回此路径
            records: 初始记录列表
            logger: 日志记录器实例
        """
        self.path = Path(path)
        self.records: List[Record] = list(records or [])
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        logger: Optional[logging.Logger] = None
    ) -> "HostsFile":
        """
        读取并解析 hosts 文件

        接受任意换行符，保留原始行顺序。

        参数:
            path: hosts 文件路径
            logger: 日志记录器实例

        返回:
            加载好的 HostsFile

        异常:
            HostsIOError: 无法读取文件
        """
        hosts_file = cls(path, logger=logger)
        try:
            with open(hosts_file.path, "r", encoding=ENCODING, errors="surrogateescape") as f:
                content = f.read()
        except OSError as e:
            hosts_file.logger.error(f"读取 hosts 文件失败: {hosts_file.path}: {e}")
            raise HostsIOError(f"无法读取 hosts 文件: {hosts_file.path}") from e

        lines = content.split("\n")
        if lines[-1] == "":
            lines.pop()

        hosts_file.records = [Record.parse(line) for line in lines]
        hosts_file.logger.debug(
            f"已加载 {hosts_file.path}: {len(hosts_file.records)} 行"
        )
        return hosts_file

    def render(self) -> str:
        return "".join(record.render() for record in self.records)

    def save(self) -> None:
        """
        原子性写回 hosts 文件

        先写入同一目录下的临时文件，再重命名替换原文件。
        路径是符号链接时写入链接指向的文件，保留链接本身。
        内存中的记录不会被修改。

        异常:
            HostsIOError: 无法写入文件
        """
        content = self.render()
        target = self.path.resolve()

        try:
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target.parent,
                prefix='.hosts.tmp.',
                text=True
            )
        except OSError as e:
            self.logger.error(f"创建临时文件失败: {target.parent}: {e}")
            raise HostsIOError(f"无法写入 hosts 文件: {self.path}") from e

        try:
            with os.fdopen(temp_fd, 'w', encoding=ENCODING,
                           errors="surrogateescape", newline='') as f:
                f.write(content)

            # 保留原文件权限，mkstemp 默认只有属主可读
            if target.exists():
                os.chmod(temp_path, stat.S_IMODE(os.stat(target).st_mode))

            os.replace(temp_path, target)
            self.logger.debug(f"已写入 {self.path}: {len(self.records)} 行")

        except OSError as e:
            # 出错时清理临时文件
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            self.logger.error(f"写入 hosts 文件失败: {self.path}: {e}")
            raise HostsIOError(f"无法写入 hosts 文件: {self.path}") from e

    def add_alias(self, address: str, name: str) -> Record:
        """
        为主机名添加别名

        如果已存在相同地址的记录，主机名追加到该记录；
        否则在文件末尾新建一条记录。

        参数:
            address: IP 地址
            name: 主机名

        返回:
            包含该主机名的记录

        异常:
            AliasExistsError: 主机名已经存在别名
        """
        if self.find_by_name(name) is not None:
            raise AliasExistsError(name)

        record = self.find_by_address(address)
        if record is None:
            record = Record.create(address, [name])
            self.records.append(record)
            self.logger.debug(f"新建记录: {address} {name}")
        else:
            record.add_name(name)
            self.logger.debug(f"追加主机名到 {record.address}: {name}")

        return record

    def remove_alias(self, name: str) -> None:
        """
        移除主机名的别名

        如果记录中没有其他主机名，整条记录（包括同一行的注释）都会被删除。

        异常:
            AliasNotFoundError: 主机名没有对应的记录
        """
        record = self.find_by_name(name)
        if record is None:
            raise AliasNotFoundError(name)

        record.remove_name(name)
        self.logger.debug(f"已从 {record.address} 移除主机名: {name}")

        if not record.names:
            self._remove_record(record)
            self.logger.debug(f"已删除空记录: {record.address}")

    def find_by_address(self, address: str) -> Optional[Record]:
        key = address.casefold()
        for record in self.records:
            if record.address is not None and record.address.casefold() == key:
                return record
        return None

    def find_by_name(self, name: str) -> Optional[Record]:
        for record in self.records:
            if record.has_name(name):
                return record
        return None

    def _remove_record(self, record: Record) -> None:
        # 按身份删除，内容相同的记录可能不止一条
        for index, existing in enumerate(self.records):
            if existing is record:
                del self.records[index]
                return

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)
