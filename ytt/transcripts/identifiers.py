# ytt/transcripts/identifiers.py
"""
Input resolution: turn user-supplied URLs or IDs into canonical identifiers.

Responsibility:
- Accept bare video IDs and the watch, short-link and embed URL forms
- Accept bare playlist IDs and any URL carrying a `list` query parameter
- Reject everything else with a typed error

No network calls. Pure deterministic string handling.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import SplitResult, parse_qs, urlsplit

from ytt.transcripts.errors import InvalidPlaylistId, InvalidVideoId
from ytt.transcripts.schema import PlaylistId, VideoId


VIDEO_ID_REGEX = re.compile(r"^[A-Za-z0-9_-]{11}$")

# Known playlist prefixes: user lists, uploads, likes, favourites, mixes, albums
PLAYLIST_ID_REGEX = re.compile(r"^(?:PL|UU|LL|FL|RD|OL|UL|EL)[A-Za-z0-9_-]{10,}$")

# Scheme-less input such as "youtu.be/abc" or "www.youtube.com/watch?v=abc"
SCHEMELESS_HOST_REGEX = re.compile(
    r"^(?:www\.|m\.|music\.)?(?:youtube\.com|youtu\.be|youtube-nocookie\.com)/",
    re.IGNORECASE,
)

YOUTUBE_HOSTS = frozenset(
    {
        "youtube.com",
        "www.youtube.com",
        "m.youtube.com",
        "music.youtube.com",
        "youtube-nocookie.com",
        "www.youtube-nocookie.com",
    }
)
SHORT_LINK_HOSTS = frozenset({"youtu.be", "www.youtu.be"})

# First path segment after which the video ID follows
PATH_PREFIXES = frozenset({"embed", "v", "shorts", "live"})


def _split(value: str) -> SplitResult:
    if SCHEMELESS_HOST_REGEX.match(value):
        value = f"https://{value}"
    return urlsplit(value)


def _video_candidate(value: str) -> Optional[str]:
    parts = _split(value)
    host = (parts.hostname or "").lower()
    segments = [s for s in parts.path.split("/") if s]

    if host in SHORT_LINK_HOSTS:
        return segments[0] if segments else None

    if host in YOUTUBE_HOSTS:
        if parts.path.rstrip("/") == "/watch":
            values = parse_qs(parts.query).get("v")
            return values[0] if values else None
        if len(segments) >= 2 and segments[0] in PATH_PREFIXES:
            return segments[1]

    return None


def extract_video_id(value: str) -> VideoId:
    """
    Resolve a bare ID or a YouTube video URL to its 11-character video ID.

    Raises InvalidVideoId when no supported form matches or the candidate
    does not satisfy the ID grammar.
    """
    candidate = (value or "").strip()
    if VIDEO_ID_REGEX.match(candidate):
        return VideoId(candidate)

    extracted = _video_candidate(candidate)
    if extracted is not None and VIDEO_ID_REGEX.match(extracted):
        return VideoId(extracted)

    raise InvalidVideoId(value)


def extract_playlist_id(value: str) -> PlaylistId:
    """
    Resolve a bare playlist ID or any URL with a `list` parameter.

    Raises InvalidPlaylistId when no playlist ID can be found.
    """
    candidate = (value or "").strip()
    if PLAYLIST_ID_REGEX.match(candidate):
        return PlaylistId(candidate)

    parts = _split(candidate)
    if parts.scheme in ("http", "https"):
        values = parse_qs(parts.query).get("list")
        if values and re.match(r"^[A-Za-z0-9_-]+$", values[0]):
            return PlaylistId(values[0])

    raise InvalidPlaylistId(value)
