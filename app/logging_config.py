"""
日志初始化（Logging Bootstrap）

说明：
- 统一初始化根日志记录器（root logger），设置格式与日志等级；
- 等级取自 `Settings.log_level`，非法值回退为 INFO；
- 在 app/main.py 构造应用时调用一次。
"""

import logging


LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def setup_logging(level: str) -> None:
    """
    初始化全局日志配置。

    参数：
        level: 日志等级字符串（DEBUG/INFO/WARNING/ERROR），取自 Settings.log_level。
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    # requests/urllib3 的连接日志过于琐碎
    logging.getLogger('urllib3').setLevel(logging.WARNING)
