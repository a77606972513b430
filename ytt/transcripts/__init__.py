from ytt.transcripts.core import YouTubeTranscript
from ytt.transcripts.errors import *  # noqa: F401,F403
from ytt.transcripts.errors import __all__ as _error_names
from ytt.transcripts.identifiers import extract_playlist_id, extract_video_id
from ytt.transcripts.schema import (
    CaptionTrack,
    FetchConfig,
    PlaylistId,
    Transcript,
    TranscriptItem,
    TranslationLanguage,
    VideoId,
)
from ytt.transcripts.transcript_list import TranscriptList

__all__ = [
    "YouTubeTranscript",
    "extract_playlist_id",
    "extract_video_id",
    "CaptionTrack",
    "FetchConfig",
    "PlaylistId",
    "Transcript",
    "TranscriptItem",
    "TranslationLanguage",
    "VideoId",
    "TranscriptList",
    *_error_names,
]
