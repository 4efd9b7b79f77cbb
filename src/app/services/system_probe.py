"""
Process and host measurements for the health report.
"""

import gc
import os
import resource
import shutil
import time
from typing import List, Optional

from pydantic import BaseModel

PROCESS_STARTED_AT = time.monotonic()
STATM_PATH = "/proc/self/statm"


class CpuStats(BaseModel):
    user_seconds: float
    system_seconds: float
    cores: int
    load_average: List[float]


class MemoryStats(BaseModel):
    # None where the platform has no /proc
    rss_bytes: Optional[int]
    peak_rss_bytes: int


class HeapStats(BaseModel):
    tracked_objects: int
    gc_counts: List[int]
    gc_thresholds: List[int]


class DiskUsage(BaseModel):
    path: str
    total_bytes: int
    used_bytes: int
    free_bytes: int
    used_percentage: float


class SystemProbe:
    def __init__(self, disk_path: str = "/"):
        self.disk_path = disk_path

    def cpu(self) -> CpuStats:
        times = os.times()
        return CpuStats(
            user_seconds=times.user,
            system_seconds=times.system,
            cores=os.cpu_count() or 1,
            load_average=list(os.getloadavg()),
        )

    def current_rss_bytes(self) -> Optional[int]:
        try:
            with open(STATM_PATH, "r") as statm:
                resident_pages = int(statm.read().split()[1])
        except OSError:
            return None
        return resident_pages * os.sysconf("SC_PAGE_SIZE")

    def memory(self) -> MemoryStats:
        # ru_maxrss is reported in kilobytes on Linux
        usage = resource.getrusage(resource.RUSAGE_SELF)
        return MemoryStats(
            rss_bytes=self.current_rss_bytes(),
            peak_rss_bytes=usage.ru_maxrss * 1024,
        )

    def heap(self) -> HeapStats:
        return HeapStats(
            tracked_objects=len(gc.get_objects()),
            gc_counts=list(gc.get_count()),
            gc_thresholds=list(gc.get_threshold()),
        )

    def disk(self) -> DiskUsage:
        usage = shutil.disk_usage(self.disk_path)
        return DiskUsage(
            path=self.disk_path,
            total_bytes=usage.total,
            used_bytes=usage.used,
            free_bytes=usage.free,
            used_percentage=(usage.used / usage.total) * 100 if usage.total else 0.0,
        )

    def uptime(self) -> float:
        return time.monotonic() - PROCESS_STARTED_AT
