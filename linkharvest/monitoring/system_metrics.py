from dataclasses import dataclass


@dataclass
class SystemMetrics:
    """System resource metrics"""
    cpu_percent: float = 0.0
    memory_used_mb: float = 0.0
    memory_percent: float = 0.0
    process_rss_mb: float = 0.0
    open_files: int = 0
