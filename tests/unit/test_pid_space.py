"""Tests for pid ceiling lookup and power-of-two sizing."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from procid.classifier import PlatformInfo
from procid.config import IdentityConfig, set_config
from procid.pid_space import (
    compute_pid_max,
    int_log2,
    is_pow2,
    pid_bits,
    pid_max,
    read_pid_max,
    round_up_pow2,
)

pytestmark = pytest.mark.unit

LINUX = PlatformInfo.from_properties({"os.name": "Linux"})
MACOS = PlatformInfo.from_properties({"os.name": "Mac OS X"})
WINDOWS = PlatformInfo.from_properties({"os.name": "Windows 10"})
SOLARIS = PlatformInfo.from_properties({"os.name": "SunOS"})


@pytest.mark.parametrize(
    ("n", "expected"),
    [(1, 1), (2, 2), (3, 4), (7, 8), (16, 16), (17, 32), (32768, 32768), (65536, 65536)],
)
def test_round_up_pow2(n: int, expected: int) -> None:
    assert round_up_pow2(n) == expected


def test_round_up_pow2_of_linux_default_pid_max() -> None:
    # 4194304 is the 64-bit kernel default; 99999 is a common hand-tuned value
    assert round_up_pow2(4194304) == 1 << 22
    assert round_up_pow2(99999) == 1 << 17


@pytest.mark.parametrize("n", [0, -1, -65536])
def test_round_up_pow2_rejects_non_positive(n: int) -> None:
    with pytest.raises(ValueError):
        round_up_pow2(n)


@given(st.integers(min_value=1, max_value=1 << 62))
def test_round_up_pow2_is_smallest_power_of_two_not_below(n: int) -> None:
    rounded = round_up_pow2(n)
    assert is_pow2(rounded)
    assert rounded >= n
    assert rounded // 2 < n


@given(st.integers(min_value=0, max_value=62))
def test_int_log2_is_exact(exponent: int) -> None:
    assert int_log2(1 << exponent) == exponent


@pytest.mark.parametrize("n", [0, -4, 3, 12, 65537])
def test_int_log2_rejects_non_powers_of_two(n: int) -> None:
    with pytest.raises(ValueError):
        int_log2(n)


class TestReadPidMax:
    def test_power_of_two_is_kept(self, tmp_path: Path) -> None:
        path = tmp_path / "pid_max"
        path.write_text("32768\n")
        assert read_pid_max(path) == 32768

    def test_other_values_round_up(self, tmp_path: Path) -> None:
        path = tmp_path / "pid_max"
        path.write_text("100000\n")
        assert read_pid_max(path) == 131072

    def test_missing_file_is_silent(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="procid.pid_space"):
            assert read_pid_max(tmp_path / "absent") is None
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_unreadable_path_logs_error(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.ERROR, logger="procid.pid_space"):
            assert read_pid_max(tmp_path) is None
        assert [r.levelno for r in caplog.records] == [logging.ERROR]

    @pytest.mark.parametrize("content", ["", "   \n", "not-a-number\n", "0\n", "-5\n"])
    def test_malformed_file_logs_error(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture, content: str
    ) -> None:
        path = tmp_path / "pid_max"
        path.write_text(content)
        with caplog.at_level(logging.ERROR, logger="procid.pid_space"):
            assert read_pid_max(path) is None
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert str(path) in errors[0].getMessage()


class TestComputePidMax:
    def test_overlong_path_uses_default(self, tmp_path: Path) -> None:
        config = IdentityConfig(pid_max_path=tmp_path / ("x" * 300) / "pid_max")
        assert compute_pid_max(LINUX, config) == 1 << 16

    def test_inaccessible_path_uses_default_and_logs(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        def _denied(_self: object, *_args: object, **_kwargs: object) -> bool:
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(Path, "exists", _denied)
        config = IdentityConfig(pid_max_path=tmp_path / "locked" / "pid_max")
        with caplog.at_level(logging.ERROR, logger="procid.pid_space"):
            assert compute_pid_max(LINUX, config) == 1 << 16
        assert [r.levelno for r in caplog.records] == [logging.ERROR]

    def test_linux_reads_kernel_file(self, tmp_path: Path) -> None:
        path = tmp_path / "pid_max"
        path.write_text("4194304\n")
        config = IdentityConfig(pid_max_path=path)
        assert compute_pid_max(LINUX, config) == 1 << 22

    def test_linux_without_file_uses_default(self, tmp_path: Path) -> None:
        config = IdentityConfig(pid_max_path=tmp_path / "absent")
        assert compute_pid_max(LINUX, config) == 1 << 16

    def test_linux_with_broken_file_uses_default(self, tmp_path: Path) -> None:
        path = tmp_path / "pid_max"
        path.write_text("garbage")
        config = IdentityConfig(pid_max_path=path)
        assert compute_pid_max(LINUX, config) == 1 << 16

    def test_macos_is_fixed_and_never_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "pid_max"
        path.write_text("1024\n")
        config = IdentityConfig(pid_max_path=path)
        assert compute_pid_max(MACOS, config) == 1 << 24

    @pytest.mark.parametrize("info", [WINDOWS, SOLARIS])
    def test_other_platforms_use_default(self, info: PlatformInfo, tmp_path: Path) -> None:
        path = tmp_path / "pid_max"
        path.write_text("1024\n")
        config = IdentityConfig(pid_max_path=path)
        assert compute_pid_max(info, config) == 1 << 16

    def test_configured_default_is_respected(self) -> None:
        config = IdentityConfig(default_pid_max=1 << 20)
        assert compute_pid_max(WINDOWS, config) == 1 << 20


def test_pid_bits_matches_pid_max() -> None:
    assert is_pow2(pid_max())
    assert 1 << pid_bits() == pid_max()


def test_pid_max_is_cached() -> None:
    first = pid_max()
    assert pid_max() is first
    assert pid_bits() is pid_bits()


@pytest.mark.skipif(
    not os.access("/proc/sys/kernel/pid_max", os.R_OK), reason="Requires Linux /proc"
)
def test_real_kernel_pid_max_covers_real_ceiling() -> None:
    set_config(IdentityConfig())
    with open("/proc/sys/kernel/pid_max", encoding="ascii") as handle:
        ceiling = int(handle.read().split()[0])
    assert pid_max() >= ceiling
