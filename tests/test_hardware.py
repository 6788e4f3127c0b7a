from __future__ import annotations

import platform

from benchlab.hardware import detect_hardware


def test_detect_hardware_describes_host() -> None:
    info = detect_hardware()
    assert info.os
    assert info.cpu
    assert info.memory == "Unknown" or info.memory.endswith(" GB")
    assert info.runtime_version == f"Python {platform.python_version()}"
