#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
系统工具函数模块
"""

import os
import sys

from core.process_table import ProcessRecord

try:
    import win32api  # noqa: F401
    import win32security  # noqa: F401
    _natives_imported = True
except ImportError:
    _natives_imported = False


def natives_loaded():
    """
    Windows原生模块（pywin32）是否已加载，兼容性检查以此为开关

    Returns:
        bool: 仅在Windows且pywin32可用时为True
    """
    return sys.platform == "win32" and _natives_imported


def get_program_path():
    """
    获取程序完整路径

    Returns:
        str: 程序完整路径
    """
    if getattr(sys, 'frozen', False):
        return sys.executable
    else:
        # 直接运行的python脚本
        return os.path.abspath(sys.argv[0])


def current_process():
    """
    获取当前进程的记录

    Returns:
        ProcessRecord: 当前程序的文件名与PID
    """
    return ProcessRecord(os.path.basename(get_program_path()), os.getpid())
