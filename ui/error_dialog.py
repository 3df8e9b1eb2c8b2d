#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
错误对话框与UI消息泵
在GUI线程上消费兼容性检查投递的消息
"""

import queue

from PySide6.QtCore import QObject, QTimer, Slot
from PySide6.QtWidgets import QApplication, QMessageBox

from utils.logger import logger
from utils.notification import send_notification


class FatalErrorDialog(QMessageBox):
    """致命错误提示框"""

    def __init__(self, message, title="错误", parent=None):
        super().__init__(parent)
        self.setIcon(QMessageBox.Critical)
        self.setWindowTitle(title)
        self.setText(message)
        self.setStandardButtons(QMessageBox.Ok)

    def show_modal(self):
        """模态显示，直到用户关闭"""
        return self.exec()


def show_fatal_error(message):
    FatalErrorDialog(message.get('message', ''), message.get('title', "错误")).show_modal()


class MessagePump(QObject):
    """从消息队列取出消息并在GUI线程上显示"""

    def __init__(self, message_queue, show_notifications=True, icon_path=None,
                 show_dialog=show_fatal_error, send_toast=send_notification, parent=None):
        """
        Args:
            message_queue (queue.Queue): 消息队列
            show_notifications (bool): 是否发送Windows通知
            icon_path (str, optional): 通知图标路径
            show_dialog (callable): 显示 error 级别消息
            send_toast (callable): 发送 info 级别消息
        """
        super().__init__(parent)
        self.message_queue = message_queue
        self.show_notifications = show_notifications
        self.icon_path = icon_path
        self._show_dialog = show_dialog
        self._send_toast = send_toast

    def drain(self):
        """
        处理队列中当前所有消息

        Returns:
            int: 处理的消息数量
        """
        handled = 0
        while True:
            try:
                message = self.message_queue.get_nowait()
            except queue.Empty:
                break

            try:
                if message.get('level') == 'error':
                    self._show_dialog(message)
                elif self.show_notifications:
                    self._send_toast(message.get('title', ''), message.get('message', ''), self.icon_path)
            except Exception as e:
                logger.error(f"处理通知失败: {str(e)}")

            self.message_queue.task_done()
            handled += 1
        return handled

    @Slot()
    def _drain_and_quit(self):
        self.drain()
        QApplication.quit()

    def start(self):
        """在事件循环开始后处理消息，处理完毕退出事件循环"""
        QTimer.singleShot(0, self._drain_and_quit)
