# ytt/batch/collector.py
"""
Result aggregation for playlist batch runs.

Central authority for collecting per-video results into the final BatchReport.
"""

from __future__ import annotations

from typing import List

from ytt.batch.schema import BatchReport, VideoResult


class BatchCollector:
    """
    Accumulates VideoResult objects in processing order.

    Thread-safe not required (videos are processed one after another).
    """

    def __init__(self, playlist_id: str, run_id: str) -> None:
        self.playlist_id = playlist_id
        self.run_id = run_id
        self.discovered = 0
        self._results: List[VideoResult] = []

    def add_result(self, result: VideoResult) -> None:
        if any(r.index == result.index for r in self._results):
            raise ValueError(f"Duplicate result for playlist position {result.index}")
        self._results.append(result)

    def has_failures(self) -> bool:
        return any(not result.success for result in self._results)

    def build_report(self) -> BatchReport:
        return BatchReport(
            playlist_id=self.playlist_id,
            run_id=self.run_id,
            discovered=self.discovered,
            results=list(self._results),
        )
