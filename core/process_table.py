#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
进程表枚举模块
通过 tasklist.exe 的 CSV 输出列出系统进程
"""

import csv
import os
import subprocess
from collections import namedtuple

from utils.logger import logger


ProcessRecord = namedtuple("ProcessRecord", ["name", "pid"])

# 隐藏子进程控制台窗口，非Windows平台没有该常量
_CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0)


class ProcessEnumerationError(OSError):
    """进程表无法读取（工具不存在、管道中断等）"""


def tasklist_path():
    """返回系统 tasklist.exe 的完整路径"""
    windir = os.environ.get("windir", r"C:\Windows")
    return os.path.join(windir, "system32", "tasklist.exe")


def parse_line(line):
    """
    解析 tasklist CSV 输出中的一行

    Args:
        line (str): 形如 "name","pid","session","session#","mem" 的一行

    Returns:
        ProcessRecord or None: 非进程行（如 "INFO: ..." 提示）返回None
    """
    line = line.strip()
    if not line.startswith('"'):
        return None

    fields = next(csv.reader([line]))
    if len(fields) < 2:
        return None

    name = fields[0].replace('"', '')
    try:
        pid = int(fields[1])
    except ValueError:
        return None
    return ProcessRecord(name, pid)


def list_processes(pid=None):
    """
    枚举进程表，惰性返回进程记录

    Args:
        pid (int, optional): 只列出该PID的进程

    Yields:
        ProcessRecord: 按进程表顺序的进程记录

    Raises:
        ProcessEnumerationError: tasklist 无法启动或输出读取失败
    """
    args = [tasklist_path(), "/fo", "csv", "/nh"]
    if pid is not None:
        args += ["/fi", f"PID eq {pid}"]

    try:
        with subprocess.Popen(
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            errors="replace",
            creationflags=_CREATE_NO_WINDOW,
        ) as proc:
            for line in proc.stdout:
                record = parse_line(line)
                if record is not None:
                    yield record
    except OSError as e:
        logger.debug(f"读取进程表失败: {str(e)}")
        raise ProcessEnumerationError(f"tasklist 调用失败: {e}") from e
