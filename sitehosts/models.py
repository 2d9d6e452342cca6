"""
Site Hosts 数据模型
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sitehosts.exceptions import (
    DuplicateNameError,
    InvalidRecordError,
    NameNotFoundError,
)

LINE_ENDING = "\r\n"


def _name_key(name: str) -> str:
    return name.casefold()


def _check_field(kind: str, value: str) -> None:
    """字段必须非空，且不能包含空白或 #，否则写回后无法解析为同一条记录"""
    if not value or "#" in value or any(char.isspace() for char in value):
        raise InvalidRecordError(f"无效的{kind}: {value!r}")


@dataclass
class Record:
    """
    代表 hosts 文件中的一行

    一条记录要么同时拥有 IP 地址和至少一个主机名，要么两者都没有
    （纯注释行或空行）。主机名比较不区分大小写，但保存原始大小写。

    属性:
        address: IP 地址，没有地址时为 None
        names: 映射到该地址的主机名，保持出现顺序
        comment: 第一个 # 之后的原始文本（不含 #），没有注释时为 None
    """

    address: Optional[str] = None
    names: List[str] = field(default_factory=list)
    comment: Optional[str] = None

    @classmethod
    def parse(cls, raw_line: str) -> "Record":
        """
        从 hosts 文件的一行解析记录

        只有一个字段的行（例如注释前的孤立文本）会丢弃该字段，
        仅保留注释。

        参数:
            raw_line: hosts 文件中的原始行

        返回:
            解析得到的记录
        """
        line = raw_line.strip()
        if not line:
            return cls()

        comment = None
        comment_position = line.find("#")
        if comment_position != -1:
            comment = line[comment_position + 1:]
            line = line[:comment_position]

        fields = line.split()
        if len(fields) < 2:
            return cls(comment=comment)

        return cls(address=fields[0], names=fields[1:], comment=comment)

    @classmethod
    def create(
        cls,
        address: Optional[str],
        names: Iterable[str] = (),
        comment: Optional[str] = None
    ) -> "Record":
        """
        使用给定的值创建记录

        空字符串的地址和注释视为 None。

        异常:
            InvalidRecordError: 只有地址或只有主机名时，或地址、主机名
                包含空白或 # 时
        """
        names = list(names)
        if address:
            _check_field("IP 地址", address)
        for name in names:
            _check_field("主机名", name)

        record = cls(
            address=address or None,
            names=names,
            comment=comment or None
        )
        record._check_complete()
        return record

    def render(self) -> str:
        """
        转换为 hosts 文件行格式

        格式: <IP>\t<主机名> <主机名>...\t#<注释>\r\n

        异常:
            InvalidRecordError: 只有地址或只有主机名时
        """
        self._check_complete()

        fields = []
        if self.address is not None:
            fields.append(self.address)
            fields.append(" ".join(self.names))
        if self.comment is not None:
            fields.append("#" + self.comment)

        return "\t".join(fields) + LINE_ENDING

    def has_name(self, name: str) -> bool:
        return self._name_index(name) is not None

    def add_name(self, name: str) -> None:
        """
        向记录添加主机名

        异常:
            DuplicateNameError: 记录中已包含该主机名
            InvalidRecordError: 记录没有 IP 地址，或主机名为空、包含空白或 #
        """
        _check_field("主机名", name)
        if self.has_name(name):
            raise DuplicateNameError(name)
        if self.address is None:
            raise InvalidRecordError(f"没有 IP 地址的记录不能添加主机名: {name}")

        self.names.append(name)

    def remove_name(self, name: str) -> None:
        """
        从记录移除主机名

        允许移除最后一个主机名，由调用者决定是否丢弃空记录。

        异常:
            NameNotFoundError: 主机名不属于此记录
        """
        index = self._name_index(name)
        if index is None:
            raise NameNotFoundError(name)

        del self.names[index]

    def _name_index(self, name: str) -> Optional[int]:
        key = _name_key(name)
        for index, existing in enumerate(self.names):
            if _name_key(existing) == key:
                return index
        return None

    def _check_complete(self) -> None:
        if (self.address is None) != (not self.names):
            raise InvalidRecordError(
                "记录必须同时拥有 IP 地址和主机名，或者两者都没有: "
                f"address={self.address!r}, names={self.names!r}"
            )


@dataclass(frozen=True)
class Site:
    """
    本地站点：站点目录下的一个子目录

    属性:
        domain: 站点域名（子目录名）
        path: 子目录的绝对路径
    """

    domain: str
    path: str

    def __str__(self) -> str:
        return f"{self.domain} -> {self.path}"
