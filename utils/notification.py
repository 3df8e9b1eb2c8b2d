#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
通知系统模块
"""

import os
import sys
from utils.logger import logger

try:
    from windows_toasts import InteractableWindowsToaster, Toast, ToastAudio, ToastDisplayImage, ToastImagePosition
except ImportError:  # 非Windows平台没有系统通知
    InteractableWindowsToaster = None


# 全局通知对象
_toaster = None


def get_toaster():
    """
    获取通知器实例（单例模式）

    Returns:
        InteractableWindowsToaster: 通知器实例
    """
    global _toaster
    if _toaster is None:
        _toaster = InteractableWindowsToaster('')
    return _toaster


def send_notification(title, message, icon_path=None, silent=True):
    """
    发送Windows通知

    Args:
        title (str): 通知标题
        message (str): 通知内容
        icon_path (str, optional): 图标路径
        silent (bool, optional): 是否静音通知

    Returns:
        bool: 是否发送成功
    """
    if InteractableWindowsToaster is None:
        logger.debug(f"系统通知不可用，跳过: {message}")
        return False

    try:
        toaster = get_toaster()

        audio = ToastAudio(silent=True) if silent else ToastAudio()
        toast = Toast(text_fields=[title, message], audio=audio)

        if icon_path and os.path.exists(icon_path):
            try:
                toast.AddImage(ToastDisplayImage.fromPath(icon_path, position=ToastImagePosition.AppLogo))
            except Exception as e:
                logger.warning(f"添加图标失败: {str(e)}")

        toaster.show_toast(toast)
        return True

    except Exception as e:
        logger.error(f"发送通知失败: {str(e)}")
        return False


def find_icon_path():
    """
    查找应用图标路径

    Returns:
        str or None: 找到的图标路径，如果未找到则返回None
    """
    base_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    icon_paths = [
        # 标准开发环境路径
        os.path.join(base_path, 'assets', 'icon', 'favicon.ico'),
        # 打包环境路径
        os.path.join(os.path.dirname(sys.executable), 'favicon.ico')
    ]

    for path in icon_paths:
        if os.path.exists(path):
            return path

    return None
