"""Host detection used to size cargo test runs."""

from __future__ import annotations

import os
import subprocess
import sys

# Try to import sched_getaffinity for accurate CPU count
try:
    from os import sched_getaffinity
    _HAS_SCHED_GETAFFINITY = True
except ImportError:
    _HAS_SCHED_GETAFFINITY = False

DEFAULT_TEST_THREADS = 4


def _sysctl_ncpu() -> int | None:
    """Read ``hw.ncpu`` on BSD-like systems (macOS)."""
    try:
        result = subprocess.run(
            ["sysctl", "-n", "hw.ncpu"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired, OSError):
        return None
    if result.returncode != 0:
        return None
    try:
        count = int(result.stdout.strip())
    except ValueError:
        return None
    return count if count > 0 else None


def detect_test_threads() -> int:
    """
    Number of threads to pass to ``cargo test -- --test-threads``.

    Prefers the scheduler affinity mask (accurate inside containers), then
    ``os.cpu_count()``, then ``sysctl hw.ncpu`` on macOS, and finally
    falls back to 4.
    """
    if _HAS_SCHED_GETAFFINITY:
        try:
            count = len(sched_getaffinity(0))
            if count > 0:
                return count
        except OSError:
            pass

    count = os.cpu_count()
    if count:
        return count

    if sys.platform == "darwin":
        count = _sysctl_ncpu()
        if count:
            return count

    return DEFAULT_TEST_THREADS
