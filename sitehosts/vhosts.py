"""
虚拟主机配置文件（Apache 格式）的读写模块
"""

import logging
import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from sitehosts.exceptions import (
    SectionNotFoundError,
    VirtualHostExistsError,
    VirtualHostNotFoundError,
    VirtualHostsIOError,
    VirtualHostsSyntaxError,
)

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
INDENT = "    "

GENERATED_WARNING = "WARNING: automatically generated section, any modifications will be lost!"


@dataclass
class Directive:
    name: str
    value: str = ""

    def render(self, depth: int) -> List[str]:
        line = f"{self.name} {self.value}" if self.value else self.name
        return [INDENT * depth + line]


@dataclass
class Comment:
    text: str

    def render(self, depth: int) -> List[str]:
        return [INDENT * depth + "#" + self.text]


@dataclass
class Blank:
    def render(self, depth: int) -> List[str]:
        return [""]


@dataclass
class Section:
    """
    配置段，例如 <VirtualHost *:80> ... </VirtualHost>

    根段没有名字，只渲染子项。
    """

    name: Optional[str] = None
    args: List[str] = field(default_factory=list)
    children: list = field(default_factory=list)

    def create_section(self, name: str, args: Optional[List[str]] = None) -> "Section":
        section = Section(name, list(args or []))
        self.children.append(section)
        return section

    def create_directive(self, name: str, value: str) -> Directive:
        directive = Directive(name, value)
        self.children.append(directive)
        return directive

    def create_comment(self, text: str) -> Comment:
        # 与 Apache 习惯一致，注释符号后留一个空格
        comment = Comment(" " + text)
        self.children.append(comment)
        return comment

    def create_blank(self) -> Blank:
        blank = Blank()
        self.children.append(blank)
        return blank

    def sections(self, name: Optional[str] = None) -> List["Section"]:
        """返回直接子段，可按段名（不区分大小写）过滤"""
        return [
            child for child in self.children
            if isinstance(child, Section)
            and (name is None or child.name.lower() == name.lower())
        ]

    def directives(self, name: Optional[str] = None) -> List[Directive]:
        return [
            child for child in self.children
            if isinstance(child, Directive)
            and (name is None or child.name.lower() == name.lower())
        ]

    def find_section_by_directive(
        self,
        section_name: str,
        directive_name: str,
        directive_value: str
    ) -> Optional["Section"]:
        """
        查找包含指定指令值的直接子段

        参数:
            section_name: 段名，例如 VirtualHost
            directive_name: 用于识别的指令名，例如 ServerName
            directive_value: 指令值，精确匹配

        返回:
            第一个匹配的段，没有则返回 None
        """
        for section in self.sections(section_name):
            for directive in section.directives(directive_name):
                if directive.value == directive_value:
                    return section
        return None

    def remove_section(self, section: "Section") -> None:
        """
        移除直接子段

        异常:
            SectionNotFoundError: 该段不是此段的直接子段
        """
        for index, child in enumerate(self.children):
            if child is section:
                del self.children[index]
                return
        raise SectionNotFoundError(f"段不属于此配置: <{section.name}>")

    def render(self, depth: int = 0) -> List[str]:
        if self.name is None:
            lines = []
            for child in self.children:
                lines.extend(child.render(depth))
            return lines

        opening = " ".join([self.name] + self.args)
        lines = [f"{INDENT * depth}<{opening}>"]
        for child in self.children:
            lines.extend(child.render(depth + 1))
        lines.append(f"{INDENT * depth}</{self.name}>")
        return lines


class VirtualHostsConfig(Section):
    """
    虚拟主机配置文件

    解析段、指令、注释和空行，不处理 Include、变量或续行。
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        super().__init__()
        self.path = Path(path) if path is not None else None

    @classmethod
    def parse(cls, text: str, path: Optional[Union[str, Path]] = None) -> "VirtualHostsConfig":
        """
        解析配置文本

        异常:
            VirtualHostsSyntaxError: 段标签不匹配或未闭合
        """
        config = cls(path)
        stack: List[Section] = [config]

        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.strip()
            current = stack[-1]

            if not line:
                current.children.append(Blank())
            elif line.startswith("#"):
                current.children.append(Comment(line[1:]))
            elif line.startswith("</"):
                if not line.endswith(">"):
                    raise VirtualHostsSyntaxError(f"无效的结束标签: {line}", line_number)
                name = line[2:-1].strip()
                if len(stack) == 1:
                    raise VirtualHostsSyntaxError(f"多余的结束标签: </{name}>", line_number)
                if name.lower() != current.name.lower():
                    raise VirtualHostsSyntaxError(
                        f"结束标签 </{name}> 与 <{current.name}> 不匹配", line_number
                    )
                stack.pop()
            elif line.startswith("<"):
                if not line.endswith(">"):
                    raise VirtualHostsSyntaxError(f"无效的开始标签: {line}", line_number)
                fields = line[1:-1].split()
                if not fields:
                    raise VirtualHostsSyntaxError("段标签缺少名称", line_number)
                stack.append(current.create_section(fields[0], fields[1:]))
            else:
                parts = line.split(None, 1)
                current.children.append(
                    Directive(parts[0], parts[1] if len(parts) > 1 else "")
                )

        if len(stack) > 1:
            raise VirtualHostsSyntaxError(f"段未闭合: <{stack[-1].name}>", len(lines))

        return config

    @classmethod
    def load(cls, path: Union[str, Path]) -> "VirtualHostsConfig":
        """
        读取并解析虚拟主机配置文件

        异常:
            VirtualHostsIOError: 无法读取文件
            VirtualHostsSyntaxError: 文件格式错误
        """
        path = Path(path)
        try:
            text = path.read_text(encoding=ENCODING, errors="surrogateescape")
        except OSError as e:
            raise VirtualHostsIOError(f"无法读取虚拟主机配置文件: {path}") from e

        config = cls.parse(text, path)
        logger.debug(f"已加载 {path}: {len(config.sections('VirtualHost'))} 个 VirtualHost")
        return config

    def to_string(self) -> str:
        lines = self.render()
        return "\n".join(lines) + "\n" if lines else ""

    def save(self) -> None:
        """
        原子性写回配置文件

        路径是符号链接时写入链接指向的文件。

        异常:
            VirtualHostsIOError: 无法写入文件
        """
        if self.path is None:
            raise VirtualHostsIOError("配置没有关联的文件路径")

        content = self.to_string()
        target = self.path.resolve()

        try:
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target.parent,
                prefix='.vhosts.tmp.',
                text=True
            )
        except OSError as e:
            raise VirtualHostsIOError(f"无法写入虚拟主机配置文件: {self.path}") from e

        try:
            with os.fdopen(temp_fd, 'w', encoding=ENCODING, errors="surrogateescape") as f:
                f.write(content)

            if target.exists():
                os.chmod(temp_path, stat.S_IMODE(os.stat(target).st_mode))

            os.replace(temp_path, target)
            logger.debug(f"已写入 {self.path}")

        except OSError as e:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise VirtualHostsIOError(f"无法写入虚拟主机配置文件: {self.path}") from e


def find_virtual_host(config: Section, server_name: str) -> Optional[Section]:
    return config.find_section_by_directive("VirtualHost", "ServerName", server_name)


def add_virtual_host(
    config: Section,
    server_name: str,
    root_path: str,
    describe_directory: bool = True
) -> Section:
    """
    向配置添加 VirtualHost 段

    参数:
        config: 虚拟主机配置
        server_name: 站点域名
        root_path: 站点根目录
        describe_directory: 是否添加 <Directory> 访问规则

    返回:
        新建的 VirtualHost 段

    异常:
        VirtualHostExistsError: 该域名的 VirtualHost 已存在
    """
    if find_virtual_host(config, server_name) is not None:
        raise VirtualHostExistsError(server_name)

    quoted_root = f'"{root_path}"'

    config.create_blank()
    virtual_host = config.create_section("VirtualHost", ["*:80"])
    virtual_host.create_comment(GENERATED_WARNING)
    virtual_host.create_directive("ServerName", server_name)
    virtual_host.create_directive("DocumentRoot", quoted_root)
    if describe_directory:
        directory = virtual_host.create_section("Directory", [quoted_root])
        directory.create_directive("Options", "Indexes FollowSymLinks Includes ExecCGI")
        directory.create_directive("AllowOverride", "All")
        directory.create_directive("Require", "all granted")

    logger.debug(f"已添加 VirtualHost: {server_name}")
    return virtual_host


def remove_virtual_host(config: Section, server_name: str) -> None:
    """
    从配置移除 VirtualHost 段

    异常:
        VirtualHostNotFoundError: 该域名的 VirtualHost 不存在
    """
    section = find_virtual_host(config, server_name)
    if section is None:
        raise VirtualHostNotFoundError(server_name)

    config.remove_section(section)
    logger.debug(f"已移除 VirtualHost: {server_name}")
