from pathlib import Path

from .base import BenchmarkSource
from .csv_file import CsvBenchmarkSource
from .seeded import SeededBenchmarkSource

from compbench.log import get_logger

log = get_logger(__name__)

__all__ = [
    "BenchmarkSource", "CsvBenchmarkSource", "SeededBenchmarkSource",
    "get_source",
]


def get_source(env_getter) -> BenchmarkSource:
    csv_path = env_getter("BENCHMARK_CSV")
    if csv_path and Path(csv_path).exists():
        log.info("Registered source: CSV (%s)", csv_path)
        return CsvBenchmarkSource(Path(csv_path))

    if csv_path:
        log.warning("BENCHMARK_CSV=%s not found — using seeded table", csv_path)
    else:
        log.info("No BENCHMARK_CSV set — using seeded table")
    return SeededBenchmarkSource()
