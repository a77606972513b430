# ytt/transcripts/negotiator.py
"""
Translation negotiation.
Single responsibility: pick the caption track that satisfies a language
preference list and an optional translation target.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ytt.transcripts.errors import NoTranscriptFound, NotTranslatable
from ytt.transcripts.schema import CaptionTrack
from ytt.transcripts.transcript_list import TranscriptList


def _matching_tracks(transcript_list: TranscriptList, languages: Sequence[str]) -> List[CaptionTrack]:
    """Tracks matching the preference order, manual before generated per code."""
    matches: List[CaptionTrack] = []
    for code in languages:
        for group in (transcript_list.manually_created, transcript_list.generated):
            if code in group:
                matches.append(group[code])
    return matches


def select_track(
    transcript_list: TranscriptList,
    languages: Sequence[str],
    translate_to: Optional[str] = None,
) -> CaptionTrack:
    """
    Resolve the track to fetch.

    Without a target this is plain preference matching. With a target, a
    matching track already in the target language is used untouched;
    otherwise the first matching translatable track is translated.
    """
    if translate_to is None:
        return transcript_list.find_transcript(languages)

    matches = _matching_tracks(transcript_list, languages)
    if not matches:
        raise NoTranscriptFound(
            transcript_list.video_id,
            languages,
            transcript_list.available_language_codes(),
        )

    for track in matches:
        if track.language_code == translate_to:
            return track

    for track in matches:
        if transcript_list.is_translatable(track):
            return transcript_list.translate(track, translate_to)

    raise NotTranslatable(transcript_list.video_id)
