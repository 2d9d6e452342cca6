#!/usr/bin/env python3
"""
Site Hosts - 主入口点

将站点目录下的每个子目录注册（或注销）为本地站点。
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# 将当前目录添加到路径以导入 sitehosts 模块
sys.path.insert(0, str(Path(__file__).parent))

from sitehosts import Config, MultiSite
from sitehosts.app import INSTALL, REMOVE
from sitehosts.config import split_list
from sitehosts.exceptions import SiteHostsError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="(Un)registers all directories in a given directory as local websites."
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--install", dest="mode", action="store_const", const=INSTALL,
                      help="register websites")
    mode.add_argument("--remove", dest="mode", action="store_const", const=REMOVE,
                      help="unregister websites")
    parser.add_argument("--localhost", metavar="DIR",
                        help="path to the localhost root directory")
    parser.add_argument("--sites", metavar="DIR",
                        help="directory whose subdirectories are websites; "
                             "a subdirectory's name is the website's domain")
    parser.add_argument("--ignore", metavar="NAMES",
                        help="comma-delimited list of directories that are not websites")
    parser.add_argument("--vhosts", metavar="FILE",
                        help="path to the virtual hosts config file")
    parser.add_argument("--hosts", metavar="FILE",
                        help="path to the hosts file")
    parser.add_argument("--log-level", metavar="LEVEL",
                        help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """从环境变量加载配置，命令行参数优先"""
    config = Config.from_env()

    if args.hosts:
        config.hosts_file_path = args.hosts
    if args.vhosts:
        config.vhosts_file_path = args.vhosts
    if args.sites:
        config.sites_dir = args.sites
    if args.localhost:
        config.localhost_dir = args.localhost
    if args.ignore is not None:
        config.ignored_sites = split_list(args.ignore)
    if args.log_level:
        config.log_level = args.log_level.upper()

    return config


def main(argv: Optional[List[str]] = None) -> int:
    """主入口点，返回退出码"""
    args = build_parser().parse_args(argv)
    config = load_config(args)

    # 初始化 MultiSite
    try:
        app = MultiSite(config)
    except (ValueError, SiteHostsError) as e:
        print(f"初始化失败: {e}", file=sys.stderr)
        return 1

    try:
        app.run(args.mode)
    except SiteHostsError as e:
        app.logger.error(f"致命错误: {e}")
        return 1

    app.logger.info("完成！请重启 httpd")
    return 0


if __name__ == '__main__':
    sys.exit(main())
