"""
兼容性检查实用工具包
"""

from utils.logger import setup_logger
from utils.notification import send_notification

__all__ = ["send_notification", "setup_logger"]
