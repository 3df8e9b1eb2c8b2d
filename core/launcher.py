#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
启动器识别模块
"""

import ntpath

import psutil

from core.process_table import list_processes
from utils.logger import logger


JAGEX_LAUNCHER = "JagexLauncher.exe"


def path_filename(path):
    """取路径中的文件名，同时支持 \\ 与 / 分隔符"""
    return ntpath.basename(path)


def command_is_launcher(command, launcher_name=JAGEX_LAUNCHER):
    """
    判断命令行的可执行文件是否为启动器

    Args:
        command (list): 命令行参数列表，首项为可执行文件
        launcher_name (str): 启动器文件名

    Returns:
        bool: 首项文件名与启动器文件名完全一致
    """
    if not command:
        return False
    return path_filename(command[0]) == launcher_name


class ProcessTableLauncherIdentifier:
    """在实时进程表中确认启动器（默认策略）"""

    def __init__(self, launcher_name=JAGEX_LAUNCHER):
        self.launcher_name = launcher_name

    def is_launcher(self, process):
        """
        Args:
            process (ProcessRecord): 候选父进程

        Returns:
            bool: 名称与启动器一致（不区分大小写）且仍在进程表中

        Raises:
            ProcessEnumerationError: 进程表读取失败
        """
        name = process.name.lower()
        if name != self.launcher_name.lower():
            logger.debug(f"父进程 {process.name} 不是 {self.launcher_name}")
            return False

        for record in list_processes():
            if record.name.lower() == name:
                return True

        logger.debug(f"{process.name} 已不在进程表中")
        return False


class CommandLineLauncherIdentifier:
    """读取父进程命令行，比较可执行文件名"""

    def __init__(self, launcher_name=JAGEX_LAUNCHER):
        self.launcher_name = launcher_name

    def is_launcher(self, process):
        try:
            command = psutil.Process(process.pid).cmdline()
        except psutil.Error as e:
            logger.debug(f"无法读取进程 {process.name} ({process.pid}) 的命令行: {str(e)}")
            return False
        return command_is_launcher(command, self.launcher_name)
