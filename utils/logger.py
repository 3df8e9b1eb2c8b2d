#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
日志系统模块
"""

import os
import sys
import datetime
from loguru import logger as _logger

# 统一logger实例
logger = _logger

DEFAULT_ROTATION = "1 day"
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {module}:{function}:{line} | {message}"


def _has_console():
    """
    判断当前进程是否有可用的控制台

    Returns:
        bool: 打包后的无控制台程序返回False
    """
    if not (getattr(sys, 'frozen', False) and sys.platform == 'win32'):
        return True
    try:
        return sys.stderr is not None and sys.stderr.isatty()
    except (AttributeError, IOError):
        return False


def setup_logger(log_dir, log_retention_days=7, log_rotation="1 day", debug_mode=False):
    """
    配置日志系统

    Args:
        log_dir (str): 日志保存目录
        log_retention_days (int): 日志保留天数
        log_rotation (str): 日志轮转周期
        debug_mode (bool): 是否启用调试模式

    Returns:
        logger: 配置好的logger实例
    """
    logger.remove()

    log_level = "DEBUG" if debug_mode else "INFO"

    today = datetime.datetime.now().strftime("%Y-%m-%d")
    log_file = os.path.join(log_dir, f"{today}.log")

    try:
        logger.add(
            log_file,
            rotation=log_rotation,
            retention=f"{log_retention_days} days",
            format=LOG_FORMAT,
            level=log_level,
            encoding="utf-8"
        )
    except ValueError as e:
        # loguru 无法解析配置的轮转周期时使用默认值
        logger.add(
            log_file,
            rotation=DEFAULT_ROTATION,
            retention=f"{log_retention_days} days",
            format=LOG_FORMAT,
            level=log_level,
            encoding="utf-8"
        )
        logger.warning(f"日志轮转周期无效: {log_rotation} ({str(e)})，使用默认值: {DEFAULT_ROTATION}")

    # 兼容性检查在启动早期运行，无控制台时只写文件
    if _has_console():
        logger.add(sys.stderr, format=LOG_FORMAT, level=log_level, colorize=True)
        logger.debug("已添加控制台日志处理器")
    else:
        logger.debug("检测到无控制台环境，不添加控制台日志处理器")

    logger.debug(f"日志系统已初始化，日志文件: {log_file}")
    logger.debug(f"调试模式: {'开启' if debug_mode else '关闭'}")

    return logger
