"""
本地站点发现模块
"""

import logging
import os
from typing import Iterable, List

from sitehosts.exceptions import SitesDirectoryError
from sitehosts.models import Site

logger = logging.getLogger(__name__)


def discover_sites(sites_dir: str, ignored: Iterable[str] = ()) -> List[Site]:
    """
    列出站点目录下的所有站点

    每个直接子目录是一个站点，目录名即站点域名。

    参数:
        sites_dir: 站点目录
        ignored: 不作为站点处理的目录名

    返回:
        按目录名排序的站点列表

    异常:
        SitesDirectoryError: 站点目录不存在或无法读取
    """
    ignored = set(ignored)

    try:
        entries = sorted(os.listdir(sites_dir))
    except OSError as e:
        raise SitesDirectoryError(f"无法读取站点目录: {sites_dir}") from e

    sites = []
    for basename in entries:
        path = os.path.realpath(os.path.join(sites_dir, basename))
        if basename in ignored:
            logger.debug(f"忽略目录: {basename}")
            continue
        if not os.path.isdir(path):
            continue
        sites.append(Site(domain=basename, path=path))

    logger.debug(f"在 {sites_dir} 中发现 {len(sites)} 个站点")
    return sites
