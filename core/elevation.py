#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
进程提权状态检测模块
"""

import subprocess

from utils.logger import logger

try:
    import pywintypes
    import win32api
    import win32security
except ImportError:  # 非Windows平台，TokenElevationProbe 不可用
    pywintypes = win32api = win32security = None


# 高完整性级别（管理员提权）的SID
HIGH_INTEGRITY_SID = "S-1-16-12288"
HIGH_INTEGRITY_RID = 12288

# 定义Windows API常量
PROCESS_QUERY_LIMITED_INFORMATION = 0x1000

_CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0)


class ElevationProbeError(OSError):
    """无法确定进程的提权状态"""


class WhoamiElevationProbe:
    """
    通过 whoami /groups 检测提权状态

    whoami 只能报告调用者自身的安全上下文，传入的进程记录不参与判断，
    用它比较父子进程时两者结果必然相同。
    """

    def is_elevated(self, process):
        """
        Args:
            process (ProcessRecord): 目标进程（仅用于日志）

        Returns:
            bool: 当前安全上下文是否为高完整性级别

        Raises:
            ElevationProbeError: whoami 无法执行
        """
        try:
            with subprocess.Popen(
                ["whoami", "/groups"],
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                errors="replace",
                creationflags=_CREATE_NO_WINDOW,
            ) as proc:
                elevated = any(HIGH_INTEGRITY_SID in line for line in proc.stdout)
        except OSError as e:
            raise ElevationProbeError(f"whoami 调用失败: {e}") from e

        logger.debug(f"whoami 提权检测 ({process.name if process else '当前进程'}): {elevated}")
        return elevated


class TokenElevationProbe:
    """读取目标进程访问令牌的完整性级别"""

    def is_elevated(self, process):
        """
        Args:
            process (ProcessRecord): 目标进程

        Returns:
            bool: 完整性级别是否不低于高完整性

        Raises:
            ElevationProbeError: 进程无法打开或令牌无法读取
        """
        if win32api is None:
            raise ElevationProbeError("pywin32 不可用，无法读取进程令牌")

        try:
            handle = win32api.OpenProcess(PROCESS_QUERY_LIMITED_INFORMATION, False, process.pid)
            try:
                token = win32security.OpenProcessToken(handle, win32security.TOKEN_QUERY)
                try:
                    sid, _attributes = win32security.GetTokenInformation(
                        token, win32security.TokenIntegrityLevel
                    )
                    sid_string = win32security.ConvertSidToStringSid(sid)
                finally:
                    win32api.CloseHandle(token)
            finally:
                win32api.CloseHandle(handle)
        except pywintypes.error as e:
            raise ElevationProbeError(f"无法读取进程 {process.name} ({process.pid}) 的令牌: {e}") from e

        elevated = integrity_rid(sid_string) >= HIGH_INTEGRITY_RID
        logger.debug(f"进程 {process.name} ({process.pid}) 完整性级别 {sid_string}，提权: {elevated}")
        return elevated


def integrity_rid(sid_string):
    """
    取完整性级别SID的RID

    Args:
        sid_string (str): 如 "S-1-16-12288"

    Returns:
        int: RID，格式不正确时为0
    """
    try:
        return int(sid_string.rsplit("-", 1)[1])
    except (IndexError, ValueError):
        return 0
