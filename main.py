#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Jagex启动器兼容性检查程序入口
"""

import sys
import queue

from config.config_manager import ConfigManager
from core.compat_check import create_compat_check
from utils.logger import setup_logger, logger
from utils.notification import find_icon_path


def main():
    """主程序入口函数"""
    config_manager = ConfigManager()

    setup_logger(
        config_manager.log_dir,
        config_manager.log_retention_days,
        config_manager.log_rotation,
        config_manager.debug_mode
    )

    logger.debug("🟩 兼容性检查已启动")

    message_queue = queue.Queue()
    detected = create_compat_check(config_manager, message_queue).check()

    if not message_queue.empty():
        # 对话框只能在GUI线程显示
        from PySide6.QtWidgets import QApplication
        from ui.error_dialog import MessagePump

        app = QApplication.instance() or QApplication(sys.argv)
        pump = MessagePump(message_queue, config_manager.show_notifications, find_icon_path())
        pump.start()
        app.exec()

    logger.debug(f"🔴 兼容性检查结束，发现问题: {detected}")
    return 1 if detected else 0


if __name__ == "__main__":
    sys.exit(main())
