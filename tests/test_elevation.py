"""
Tests for core/elevation.py.
"""

from unittest.mock import MagicMock

import pytest

from conftest import make_popen
from core import elevation
from core.elevation import (
    ElevationProbeError,
    TokenElevationProbe,
    WhoamiElevationProbe,
    integrity_rid,
)
from core.process_table import ProcessRecord


CLIENT = ProcessRecord("OpenRune.exe", 4242)

WHOAMI_HIGH = (
    "GROUP INFORMATION\n"
    "-----------------\n"
    "BUILTIN\\Administrators   Alias  S-1-5-32-544  Mandatory group, Enabled by default, Enabled group, Group owner\n"
    "Mandatory Label\\High Mandatory Level Label S-1-16-12288\n"
)
WHOAMI_MEDIUM = (
    "GROUP INFORMATION\n"
    "Mandatory Label\\Medium Mandatory Level Label S-1-16-8192\n"
)


class TestWhoamiElevationProbe:
    def test_high_integrity_is_elevated(self, monkeypatch):
        monkeypatch.setattr("core.elevation.subprocess.Popen", MagicMock(return_value=make_popen(WHOAMI_HIGH)))
        assert WhoamiElevationProbe().is_elevated(CLIENT) is True

    def test_medium_integrity_is_not_elevated(self, monkeypatch):
        monkeypatch.setattr("core.elevation.subprocess.Popen", MagicMock(return_value=make_popen(WHOAMI_MEDIUM)))
        assert WhoamiElevationProbe().is_elevated(CLIENT) is False

    def test_runs_whoami_groups(self, monkeypatch):
        popen = MagicMock(return_value=make_popen(WHOAMI_MEDIUM))
        monkeypatch.setattr("core.elevation.subprocess.Popen", popen)
        WhoamiElevationProbe().is_elevated(CLIENT)
        assert popen.call_args[0][0] == ["whoami", "/groups"]

    def test_missing_utility_raises(self, monkeypatch):
        monkeypatch.setattr("core.elevation.subprocess.Popen", MagicMock(side_effect=FileNotFoundError("whoami")))
        with pytest.raises(ElevationProbeError):
            WhoamiElevationProbe().is_elevated(CLIENT)


class TestIntegrityRid:
    @pytest.mark.parametrize("sid,rid", [
        ("S-1-16-8192", 8192),
        ("S-1-16-12288", 12288),
        ("S-1-16-16384", 16384),
        ("garbage", 0),
    ])
    def test_parses_rid(self, sid, rid):
        assert integrity_rid(sid) == rid


@pytest.fixture
def fake_win32(monkeypatch, fake_pywintypes):
    win32api = MagicMock()
    win32security = MagicMock()
    win32security.GetTokenInformation.return_value = ("sid", 0x60)
    monkeypatch.setattr(elevation, "win32api", win32api)
    monkeypatch.setattr(elevation, "win32security", win32security)
    monkeypatch.setattr(elevation, "pywintypes", fake_pywintypes)
    return win32api, win32security


class TestTokenElevationProbe:
    def test_high_integrity_token_is_elevated(self, fake_win32):
        _, win32security = fake_win32
        win32security.ConvertSidToStringSid.return_value = "S-1-16-12288"
        assert TokenElevationProbe().is_elevated(CLIENT) is True

    def test_system_integrity_token_is_elevated(self, fake_win32):
        _, win32security = fake_win32
        win32security.ConvertSidToStringSid.return_value = "S-1-16-16384"
        assert TokenElevationProbe().is_elevated(CLIENT) is True

    def test_medium_integrity_token_is_not_elevated(self, fake_win32):
        _, win32security = fake_win32
        win32security.ConvertSidToStringSid.return_value = "S-1-16-8192"
        assert TokenElevationProbe().is_elevated(CLIENT) is False

    def test_opens_target_pid_and_closes_handles(self, fake_win32):
        win32api, win32security = fake_win32
        win32security.ConvertSidToStringSid.return_value = "S-1-16-8192"
        TokenElevationProbe().is_elevated(CLIENT)
        assert win32api.OpenProcess.call_args[0][2] == 4242
        assert win32api.CloseHandle.call_count == 2

    def test_open_failure_raises(self, fake_win32, fake_pywintypes):
        win32api, _ = fake_win32
        win32api.OpenProcess.side_effect = fake_pywintypes.error(5, "OpenProcess", "Access is denied.")
        with pytest.raises(ElevationProbeError):
            TokenElevationProbe().is_elevated(CLIENT)

    def test_without_pywin32_raises(self, monkeypatch):
        monkeypatch.setattr(elevation, "win32api", None)
        with pytest.raises(ElevationProbeError):
            TokenElevationProbe().is_elevated(CLIENT)
