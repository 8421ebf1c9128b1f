"""
Schema — Pydantic models for the benchmark report.

Runtime contract fields (present in every report):
  package_name, schema_version.
"""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from builderproxy import PACKAGE_NAME, SCHEMA_VERSION


class BenchmarkRun(BaseModel):
    """One timed loop: *objects* builds with one kind of builder."""
    builder: str             # proxy | manual
    multiplier: int
    objects: int
    elapsed_ms: float


class BenchmarkReport(BaseModel):
    """All runs of one benchmark invocation."""
    package_name: str = PACKAGE_NAME
    schema_version: str = SCHEMA_VERSION
    python_version: str
    scale: int
    multipliers: List[int] = Field(default_factory=list)
    runs: List[BenchmarkRun] = Field(default_factory=list)

    def total_ms(self, builder: str) -> float:
        return sum(r.elapsed_ms for r in self.runs if r.builder == builder)
