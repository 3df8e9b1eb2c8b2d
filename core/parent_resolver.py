#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
父进程解析模块

tasklist 不提供父进程PID字段，TasklistParentResolver 只能按进程表相邻关系推断，
结果仅供参考；能拿到真实父PID的平台应使用 PsutilParentResolver。
"""

import os

import psutil

from core.process_table import ProcessEnumerationError, ProcessRecord, list_processes
from utils.logger import logger


class TasklistParentResolver:
    """基于进程表顺序的启发式父进程解析"""

    def __init__(self, helper_process="svchost.exe"):
        """
        Args:
            helper_process (str): 扫描时跳过的系统宿主进程名
        """
        self.helper_process = helper_process

    def _first_candidate(self):
        candidate = None
        for record in list_processes():
            candidate = record
            if record.name != self.helper_process:
                break
        return candidate

    def resolve(self):
        """
        推断当前进程的直接父进程

        Returns:
            ProcessRecord or None: 未找到候选进程时返回None

        Raises:
            ProcessEnumerationError: 进程表读取失败
        """
        candidate = self._first_candidate()
        if candidate is None or candidate.name == self.helper_process:
            logger.debug("进程表中没有可用的父进程候选")
            return None

        # 按PID回查一次，进程可能已在两次查询之间退出
        parent = None
        for record in list_processes(pid=candidate.pid):
            parent = record

        logger.debug(f"推断的父进程: {parent}")
        return parent


class PsutilParentResolver:
    """通过系统父PID精确解析父进程"""

    def __init__(self, pid=None):
        self.pid = pid if pid is not None else os.getpid()

    def resolve(self):
        """
        Returns:
            ProcessRecord or None: 父进程不存在时返回None

        Raises:
            ProcessEnumerationError: 无权限读取进程信息
        """
        try:
            parent = psutil.Process(self.pid).parent()
            if parent is None:
                return None
            record = ProcessRecord(parent.name(), parent.pid)
        except psutil.NoSuchProcess:
            logger.debug(f"进程 {self.pid} 的父进程已退出")
            return None
        except psutil.Error as e:
            raise ProcessEnumerationError(f"无法读取进程 {self.pid} 的父进程: {e}") from e

        logger.debug(f"父进程: {record}")
        return record
