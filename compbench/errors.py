"""Exceptions raised at the edges of the benchmarking engine.

The scoring and percentile code never raises for numeric input; these are for
lookups, catalog loading and the status tracker.
"""
from __future__ import annotations


class BenchmarkError(Exception):
    """Base class for compbench errors."""


class BenchmarkNotFound(BenchmarkError):
    """No reference summary exists for a (region, role, employment type)."""

    def __init__(self, region: str, role: str, employment_type: str) -> None:
        self.region = region
        self.role = role
        self.employment_type = employment_type
        super().__init__(
            f"No salary benchmark for {role} / {employment_type} in {region}"
        )


class CatalogError(BenchmarkError):
    """The catalog YAML is malformed."""


class UnknownStageError(BenchmarkError, ValueError):
    """A stage name is not part of the FunnelStage enumeration."""


class StageUnchangedError(BenchmarkError, ValueError):
    """A transition targets the stage the entity is already in."""
