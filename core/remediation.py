#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
应用兼容性设置修复模块
删除 AppCompatFlags\\Layers 下强制"以管理员身份运行"的注册表值
"""

from enum import Enum

from utils.logger import logger

try:
    import pywintypes
    import win32api
    import win32con
except ImportError:  # 非Windows平台
    pywintypes = win32api = win32con = None


# 该键下的值被设置为 RUNASADMIN
COMPAT_KEY = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion\AppCompatFlags\Layers"

ERROR_FILE_NOT_FOUND = 2
ERROR_ACCESS_DENIED = 5


class CompatibilityFlagScope(Enum):
    """兼容性设置所在的注册表根键"""

    MACHINE_WIDE = "HKLM"
    CURRENT_USER = "HKCU"

    @property
    def hive(self):
        if self is CompatibilityFlagScope.MACHINE_WIDE:
            return win32con.HKEY_LOCAL_MACHINE
        return win32con.HKEY_CURRENT_USER


def reg_delete_value(scope, key, value_name):
    """
    删除注册表值

    Args:
        scope (CompatibilityFlagScope): 根键
        key (str): 子键路径
        value_name (str): 值名称

    Returns:
        bool: 是否确实删除了一个值；值不存在或无权限时返回False
    """
    if win32api is None:
        logger.debug("pywin32 不可用，跳过注册表修改")
        return False

    try:
        hkey = win32api.RegOpenKeyEx(scope.hive, key, 0, win32con.KEY_SET_VALUE)
        try:
            win32api.RegDeleteValue(hkey, value_name)
        finally:
            win32api.RegCloseKey(hkey)
    except pywintypes.error as e:
        if e.winerror == ERROR_FILE_NOT_FOUND:
            logger.debug(f"{scope.value}\\{key} 中没有 {value_name}")
        elif e.winerror == ERROR_ACCESS_DENIED:
            logger.warning(f"无权限删除 {scope.value}\\{key}\\{value_name}")
        else:
            logger.warning(f"删除注册表值 {scope.value}\\{key}\\{value_name} 失败: {str(e)}")
        return False

    logger.debug(f"已删除注册表值 {scope.value}\\{key}\\{value_name}")
    return True


def remove_compatibility_flags(executable):
    """
    从全机和当前用户两处清除可执行文件的兼容性设置

    Args:
        executable (str): 可执行文件路径（兼容性设置的值名称）

    Returns:
        bool: 任一处删除成功即为True
    """
    patched = reg_delete_value(CompatibilityFlagScope.MACHINE_WIDE, COMPAT_KEY, executable)  # 所有用户
    patched |= reg_delete_value(CompatibilityFlagScope.CURRENT_USER, COMPAT_KEY, executable)  # 当前用户

    if patched:
        logger.info(f"已清除 {executable} 的应用兼容性设置")
    return patched
