#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Jagex启动器兼容性检查

本程序以管理员身份运行而启动它的 Jagex 启动器没有时，系统不会把启动器的环境变量
传给提权进程，导致无法登录。检查到这种情况时尝试清除本程序"以管理员身份运行"的
兼容性设置并提示用户。
"""

from collections import namedtuple
from enum import Enum

from core import system_utils
from core.elevation import ElevationProbeError, TokenElevationProbe, WhoamiElevationProbe
from core.launcher import CommandLineLauncherIdentifier, ProcessTableLauncherIdentifier
from core.notifier import CompatibilityNotifier
from core.parent_resolver import PsutilParentResolver, TasklistParentResolver
from core.process_table import ProcessEnumerationError
from core.remediation import remove_compatibility_flags
from utils.logger import logger


CheckOutcome = namedtuple("CheckOutcome", ["mismatch_detected", "patched"])


class CheckState(Enum):
    DISABLED = "disabled"
    PROBING = "probing"
    REMEDIATING = "remediating"
    REPORTED = "reported"


class LauncherCompatibilityCheck:
    """检查并修复提权不一致问题，每次启动只应调用一次"""

    def __init__(self, parent_resolver, launcher_identifier, elevation_probe, notifier,
                 remediator=remove_compatibility_flags, natives_loaded=None,
                 current_process=None, executable=None):
        """
        Args:
            parent_resolver: 提供 resolve() -> ProcessRecord or None
            launcher_identifier: 提供 is_launcher(ProcessRecord) -> bool
            elevation_probe: 提供 is_elevated(ProcessRecord) -> bool
            notifier: 提供 notify(patched, executable)
            remediator (callable): executable -> bool，清除兼容性设置
            natives_loaded (bool, optional): 原生模块开关，默认在检查时读取
            current_process (ProcessRecord, optional): 当前进程，默认取自身
            executable (str, optional): 兼容性设置中的值名称，默认为程序路径
        """
        self.parent_resolver = parent_resolver
        self.launcher_identifier = launcher_identifier
        self.elevation_probe = elevation_probe
        self.notifier = notifier
        self.remediator = remediator
        self.natives_loaded = natives_loaded
        self.current_process = current_process
        self.executable = executable
        self.state = None

    def _gate_open(self):
        if self.natives_loaded is None:
            return system_utils.natives_loaded()
        return self.natives_loaded

    def _probe(self):
        """
        收集父进程与提权信息

        Returns:
            bool: 是否确认为问题配置（父进程为启动器、自身已提权、启动器未提权）
        """
        parent = self.parent_resolver.resolve()
        if parent is None:
            logger.debug("无法确定父进程")
            return False

        if not self.launcher_identifier.is_launcher(parent):
            return False

        current = self.current_process or system_utils.current_process()
        if not self.elevation_probe.is_elevated(current):
            logger.debug("当前进程未提权")
            return False

        if self.elevation_probe.is_elevated(parent):
            logger.debug("启动器同样以管理员身份运行")
            return False

        return True

    def run(self):
        """
        执行检查

        Returns:
            CheckOutcome: 是否发现问题，以及兼容性设置是否已被清除
        """
        if not self._gate_open():
            self.state = CheckState.DISABLED
            logger.debug("原生模块未加载，跳过Jagex启动器兼容性检查")
            return CheckOutcome(False, False)

        self.state = CheckState.PROBING
        try:
            mismatch = self._probe()
        except (ProcessEnumerationError, ElevationProbeError) as e:
            logger.warning(f"兼容性检查失败，按无问题处理: {str(e)}")
            mismatch = False
        except Exception as e:
            logger.error(f"兼容性检查出现异常: {str(e)}")
            mismatch = False

        if not mismatch:
            self.state = CheckState.REPORTED
            return CheckOutcome(False, False)

        logger.error(
            "当前程序以管理员身份运行，而 Jagex 启动器没有。提权进程无法继承非提权进程的环境变量，"
            "这会导致无法登录。请以普通用户身份运行本程序，或以管理员身份运行 Jagex 启动器。"
        )

        self.state = CheckState.REMEDIATING
        executable = self.executable or system_utils.get_program_path()
        try:
            patched = self.remediator(executable)
        except Exception as e:
            logger.error(f"清除兼容性设置失败: {str(e)}")
            patched = False

        try:
            self.notifier.notify(patched, executable)
        except Exception as e:
            logger.error(f"投递兼容性通知失败: {str(e)}")

        self.state = CheckState.REPORTED
        return CheckOutcome(True, patched)

    def check(self):
        """
        Returns:
            bool: 是否发现并处理了提权不一致
        """
        return self.run().mismatch_detected


def create_compat_check(config_manager, message_queue):
    """
    按配置组装兼容性检查

    Args:
        config_manager (ConfigManager): 配置管理器
        message_queue (queue.Queue): UI线程消费的消息队列

    Returns:
        LauncherCompatibilityCheck: 检查对象
    """
    if config_manager.parent_strategy == "psutil":
        parent_resolver = PsutilParentResolver()
    else:
        parent_resolver = TasklistParentResolver(config_manager.helper_process)

    if config_manager.launcher_identifier == "command_line":
        launcher_identifier = CommandLineLauncherIdentifier(config_manager.launcher_executable)
    else:
        launcher_identifier = ProcessTableLauncherIdentifier(config_manager.launcher_executable)

    if config_manager.elevation_probe == "whoami":
        elevation_probe = WhoamiElevationProbe()
    else:
        elevation_probe = TokenElevationProbe()

    logger.debug(
        f"兼容性检查策略: 父进程={config_manager.parent_strategy}, "
        f"提权检测={config_manager.elevation_probe}, 启动器识别={config_manager.launcher_identifier}"
    )

    return LauncherCompatibilityCheck(
        parent_resolver,
        launcher_identifier,
        elevation_probe,
        CompatibilityNotifier(message_queue, config_manager.app_name),
    )


def check(config_manager, message_queue):
    """
    运行一次兼容性检查

    Args:
        config_manager (ConfigManager): 配置管理器
        message_queue (queue.Queue): UI线程消费的消息队列，调用方负责取出并显示通知

    Returns:
        bool: 是否发现并处理了提权不一致
    """
    return create_compat_check(config_manager, message_queue).check()
