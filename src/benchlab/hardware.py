from __future__ import annotations

import os
import platform

from benchlab.storage.models import HardwareInfo


def _os_label() -> str:
    system = platform.system() or "Unknown OS"
    if system == "Darwin":
        release = platform.mac_ver()[0]
        return f"macOS {release}" if release else "macOS"
    release = platform.release()
    return f"{system} {release}" if release else system


def _cpu_label() -> str:
    cpu = platform.processor() or platform.machine() or "Unknown CPU"
    cores = os.cpu_count()
    if cores:
        cpu += f" ({cores} cores)"
    return cpu


def _memory_label() -> str:
    try:
        pages = os.sysconf("SC_PHYS_PAGES")
        page_size = os.sysconf("SC_PAGE_SIZE")
    except (AttributeError, ValueError, OSError):
        return "Unknown"
    if pages <= 0 or page_size <= 0:
        return "Unknown"
    return f"{round(pages * page_size / 1024**3)} GB"


def detect_hardware() -> HardwareInfo:
    """Describe the machine driving the benchmark."""
    return HardwareInfo(
        os=_os_label(),
        cpu=_cpu_label(),
        memory=_memory_label(),
        runtime_version=f"Python {platform.python_version()}",
    )
