from ytt.batch.collector import BatchCollector
from ytt.batch.runner import run_playlist
from ytt.batch.schema import BatchReport, FailureType, VideoFailure, VideoResult

__all__ = ["BatchCollector", "run_playlist", "BatchReport", "FailureType", "VideoFailure", "VideoResult"]
