#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
兼容性问题通知模块
消息投递到UI线程的消息队列，不等待对话框关闭
"""

from utils.logger import logger


DEFAULT_APP_NAME = "OpenRune"


def compose_message(patched, executable, app_name=DEFAULT_APP_NAME):
    """
    生成提示用户的错误消息

    Args:
        patched (bool): 是否已尝试修改兼容性设置
        executable (str): 可执行文件
        app_name (str): 应用名称

    Returns:
        str: 消息文本
    """
    parts = [f"Running {app_name} as an administrator is incompatible with the Jagex launcher."]
    if patched:
        parts.append(
            f" {app_name} has attempted to fix this problem by changing the compatibility settings of {executable}."
        )
        parts.append(f" Try running {app_name} again.")
    parts.append(
        " If the problem persists, either run the Jagex launcher as administrator, or change the "
        f"{executable} compatibility settings to not run as administrator."
    )
    return "".join(parts)


class CompatibilityNotifier:
    """把兼容性问题投递到UI消息队列"""

    def __init__(self, message_queue, app_name=DEFAULT_APP_NAME):
        """
        Args:
            message_queue (queue.Queue): UI线程消费的消息队列
            app_name (str): 应用名称
        """
        self.message_queue = message_queue
        self.app_name = app_name

    def notify(self, patched, executable):
        self.message_queue.put_nowait({
            'title': f"{self.app_name} - Jagex launcher compatibility",
            'message': compose_message(patched, executable, self.app_name),
            'level': 'error',
        })

        if patched:
            self.message_queue.put_nowait({
                'title': self.app_name,
                'message': f"Application compatibility settings have been unset for {executable}",
                'level': 'info',
            })

        logger.debug("兼容性问题通知已投递到消息队列")
