"""核心功能模块"""

from core.compat_check import LauncherCompatibilityCheck, check, create_compat_check

__all__ = ["LauncherCompatibilityCheck", "check", "create_compat_check"]
