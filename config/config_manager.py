#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
配置管理模块
"""

import os
import yaml
from utils.logger import logger


PARENT_STRATEGIES = ("tasklist", "psutil")
ELEVATION_PROBES = ("token", "whoami")
LAUNCHER_IDENTIFIERS = ("table", "command_line")


class ConfigManager:
    """配置管理类"""

    def __init__(self, config_dir=None):
        """
        初始化配置管理器

        Args:
            config_dir (str, optional): 配置目录，默认为 ~/.launcher-compat
        """
        self.config_dir = config_dir or os.path.join(os.path.expanduser("~"), ".launcher-compat")
        self.log_dir = os.path.join(self.config_dir, "logs")
        self.config_file = os.path.join(self.config_dir, "config.yaml")

        # 应用设置
        self.app_name = "OpenRune"
        self.show_notifications = True  # Windows通知开关默认值
        self.log_retention_days = 7  # 默认日志保留天数
        self.log_rotation = "1 day"  # 默认日志轮转周期
        self.debug_mode = False  # 调试模式默认值

        # 启动器设置
        self.launcher_executable = "JagexLauncher.exe"
        self.helper_process = "svchost.exe"  # 推断父进程时跳过的宿主进程

        # 检测策略
        self.parent_strategy = "tasklist"
        self.elevation_probe = "token"
        self.launcher_identifier = "table"

        self._ensure_directories()

        self.load_config()

    def _ensure_directories(self):
        """确保配置和日志目录存在"""
        for directory in (self.config_dir, self.log_dir):
            if not os.path.exists(directory):
                try:
                    os.makedirs(directory)
                    logger.debug(f"已创建目录: {directory}")
                except Exception as e:
                    logger.error(f"创建目录失败: {str(e)}")

    @staticmethod
    def default_config():
        return {
            "application": {"name": "OpenRune"},
            "launcher": {"executable": "JagexLauncher.exe", "helper_process": "svchost.exe"},
            "detection": {"parent_strategy": "tasklist", "elevation_probe": "token", "launcher_identifier": "table"},
            "notifications": {"enabled": True},
            "logging": {"retention_days": 7, "rotation": "1 day", "debug_mode": False},
        }

    def load_config(self):
        """
        加载配置文件

        Returns:
            bool: 是否加载成功
        """
        default_config = self.default_config()

        if not os.path.exists(self.config_file):
            logger.debug("配置文件不存在，将创建默认配置文件")
            self._create_default_config(default_config)
            return True

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except Exception as e:
            # 只有文件无法解析时才重建默认配置
            logger.error(f"加载配置文件失败: {str(e)}")
            self._create_default_config(default_config)
            return False

        if not config_data or not isinstance(config_data, dict):
            config_data = default_config
            logger.warning("配置文件为空或无效，将使用默认配置")

        self._apply(config_data)
        logger.debug("配置文件加载成功")
        return True

    @staticmethod
    def _section(config_data, name):
        section = config_data.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            logger.warning(f"配置文件中的 {name} 段格式无效，使用默认值")
            return {}
        return section

    def _apply(self, config_data):
        """从配置字典读取设置，单项无效时保留该项默认值"""
        application = self._section(config_data, "application")
        if application.get("name"):
            self.app_name = str(application["name"])

        launcher = self._section(config_data, "launcher")
        if launcher.get("executable"):
            self.launcher_executable = str(launcher["executable"])
        if launcher.get("helper_process"):
            self.helper_process = str(launcher["helper_process"])

        detection = self._section(config_data, "detection")
        self.parent_strategy = self._choice(detection, "parent_strategy", PARENT_STRATEGIES, "tasklist")
        self.elevation_probe = self._choice(detection, "elevation_probe", ELEVATION_PROBES, "token")
        self.launcher_identifier = self._choice(detection, "launcher_identifier", LAUNCHER_IDENTIFIERS, "table")

        notifications = self._section(config_data, "notifications")
        if "enabled" in notifications:
            self.show_notifications = bool(notifications["enabled"])

        logging_config = self._section(config_data, "logging")
        if "retention_days" in logging_config:
            try:
                self.log_retention_days = int(logging_config["retention_days"])
            except (TypeError, ValueError):
                logger.warning(f"配置文件中的 retention_days 值无效: {logging_config['retention_days']}，使用默认值: 7")
                self.log_retention_days = 7
            # 确保配置值合法
            if self.log_retention_days < 1:
                self.log_retention_days = 1
        if "rotation" in logging_config:
            rotation = logging_config["rotation"]
            if isinstance(rotation, str) and rotation.strip():
                self.log_rotation = rotation
            else:
                logger.warning(f"配置文件中的 rotation 值无效: {rotation}，使用默认值: 1 day")
                self.log_rotation = "1 day"
        if "debug_mode" in logging_config:
            self.debug_mode = bool(logging_config["debug_mode"])
            logger.debug(f"已从配置文件加载调试模式设置: {self.debug_mode}")

    @staticmethod
    def _choice(section, key, choices, default):
        value = section.get(key, default)
        if value not in choices:
            logger.warning(f"配置文件中的 {key} 值无效: {value}，使用默认值: {default}")
            return default
        return value

    def _create_default_config(self, default_config):
        """
        创建默认配置文件

        Args:
            default_config (dict): 默认配置数据
        """
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                yaml.dump(default_config, f, default_flow_style=False, allow_unicode=True)

            self._apply(default_config)
            logger.debug("已创建并加载默认配置")
        except Exception as e:
            logger.error(f"创建默认配置文件失败: {str(e)}")

    def save_config(self):
        """
        保存配置到文件

        Returns:
            bool: 保存是否成功
        """
        try:
            config_data = {
                "application": {"name": self.app_name},
                "launcher": {"executable": self.launcher_executable, "helper_process": self.helper_process},
                "detection": {
                    "parent_strategy": self.parent_strategy,
                    "elevation_probe": self.elevation_probe,
                    "launcher_identifier": self.launcher_identifier,
                },
                "notifications": {"enabled": self.show_notifications},
                "logging": {
                    "retention_days": self.log_retention_days,
                    "rotation": self.log_rotation,
                    "debug_mode": self.debug_mode,
                },
            }

            with open(self.config_file, "w", encoding="utf-8") as f:
                yaml.dump(config_data, f, default_flow_style=False, allow_unicode=True)

            logger.debug("配置已保存")
            return True
        except Exception as e:
            logger.error(f"保存配置文件失败: {str(e)}")
            return False
