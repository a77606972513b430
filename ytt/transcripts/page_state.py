# ytt/transcripts/page_state.py
"""
Embedded page state extraction.
Single responsibility: know the shape of the JSON YouTube embeds in its pages.

Watch pages carry `ytInitialPlayerResponse` (playability, title, captions).
Playlist pages carry `ytInitialData` (first batch of entries + continuation).
InnerTube `browse` responses carry further batches.

Everything coupled to the undocumented page layout lives here; callers only
ever see PageState or a typed error.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ytt.transcripts.errors import VideoUnavailable, YouTubeDataUnparsable


_DECODER = json.JSONDecoder()


class PageState(BaseModel):
    """Normalised view of one fetched page or continuation response."""
    playability_status: Optional[str] = None
    playability_reason: Optional[str] = None
    playability_subreasons: Tuple[str, ...] = ()
    title: Optional[str] = None
    captions: Optional[Dict[str, Any]] = None  # raw playerCaptionsTracklistRenderer
    video_ids: Tuple[str, ...] = ()
    continuation: Optional[str] = None
    api_key: Optional[str] = None
    client_version: Optional[str] = None

    model_config = ConfigDict(frozen=True)


def _dig(obj: Any, *path: Any) -> Any:
    """Walk nested dicts/lists; None as soon as a step is missing."""
    for key in path:
        if isinstance(obj, dict) and isinstance(key, str):
            obj = obj.get(key)
        elif isinstance(obj, list) and isinstance(key, int) and -len(obj) <= key < len(obj):
            obj = obj[key]
        else:
            return None
    return obj


def _find_key(obj: Any, key: str) -> Iterator[Any]:
    """Depth-first search yielding every value stored under `key`."""
    if isinstance(obj, dict):
        for k, v in obj.items():
            if k == key:
                yield v
            yield from _find_key(v, key)
    elif isinstance(obj, list):
        for v in obj:
            yield from _find_key(v, key)


def _text_of(node: Any) -> Optional[str]:
    """Read a YouTube text node: `simpleText` or concatenated `runs`."""
    if isinstance(node, str):
        return node
    simple = _dig(node, "simpleText")
    if isinstance(simple, str):
        return simple
    runs = _dig(node, "runs")
    if isinstance(runs, list):
        parts = [r.get("text", "") for r in runs if isinstance(r, dict)]
        joined = "".join(p for p in parts if isinstance(p, str))
        return joined or None
    return None


def extract_json_assignment(html: str, variable: str, *, identifier: str) -> Dict[str, Any]:
    """
    Decode the JSON object assigned to `variable` inside an HTML page.

    Matches `variable = {...}` and `window["variable"] = {...}`. Decoding is
    bracket-balanced, so trailing script text is ignored.
    Raises YouTubeDataUnparsable when no assignment decodes to an object.
    """
    name = re.escape(variable)
    pattern = re.compile(rf"""(?:\b{name}|window\[["']{name}["']\])\s*=\s*(?=\{{)""")

    for match in pattern.finditer(html):
        try:
            value, _ = _DECODER.raw_decode(html, match.end())
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value

    raise YouTubeDataUnparsable(identifier)


def extract_ytcfg_value(html: str, key: str) -> Optional[str]:
    match = re.search(rf'"{re.escape(key)}"\s*:\s*"([^"]*)"', html)
    return match.group(1) if match else None


def _optional_str(value: Any, identifier: str) -> Optional[str]:
    """A string field that may be absent; any other type means the layout changed."""
    if value is None or isinstance(value, str):
        return value
    raise YouTubeDataUnparsable(identifier)


def parse_watch_page(html: str, video_id: str) -> PageState:
    """Normalise a watch page. Raises YouTubeDataUnparsable without player JSON."""
    player = extract_json_assignment(html, "ytInitialPlayerResponse", identifier=video_id)

    playability = player.get("playabilityStatus")
    if playability is None:
        playability = {}
    elif not isinstance(playability, dict):
        raise YouTubeDataUnparsable(video_id)

    subreason_node = _dig(playability, "errorScreen", "playerErrorMessageRenderer", "subreason")
    subreasons: List[str] = []
    if isinstance(_dig(subreason_node, "runs"), list):
        subreasons = [
            r["text"]
            for r in subreason_node["runs"]
            if isinstance(r, dict) and isinstance(r.get("text"), str) and r["text"]
        ]
    else:
        text = _text_of(subreason_node)
        if text:
            subreasons = [text]

    captions = _dig(player, "captions", "playerCaptionsTracklistRenderer")

    return PageState(
        playability_status=_optional_str(playability.get("status"), video_id),
        playability_reason=_optional_str(playability.get("reason"), video_id)
        or _text_of(_dig(playability, "errorScreen", "playerErrorMessageRenderer", "reason")),
        playability_subreasons=tuple(subreasons),
        title=_optional_str(_dig(player, "videoDetails", "title"), video_id),
        captions=captions if isinstance(captions, dict) else None,
        api_key=extract_ytcfg_value(html, "INNERTUBE_API_KEY"),
        client_version=extract_ytcfg_value(html, "INNERTUBE_CLIENT_VERSION"),
    )


def _entries(contents: Any) -> Tuple[List[str], Optional[str]]:
    """Split a contents array into video ids (in order) and the continuation token."""
    video_ids: List[str] = []
    continuation: Optional[str] = None
    if not isinstance(contents, list):
        return video_ids, continuation

    for item in contents:
        if not isinstance(item, dict):
            continue
        video_id = _dig(item, "playlistVideoRenderer", "videoId") or _dig(item, "lockupViewModel", "contentId")
        if isinstance(video_id, str) and video_id:
            video_ids.append(video_id)
            continue
        renderer = item.get("continuationItemRenderer")
        if renderer is not None:
            for command in _find_key(renderer, "continuationCommand"):
                token = _dig(command, "token")
                if isinstance(token, str) and token:
                    continuation = token
                    break

    return video_ids, continuation


def parse_playlist_page(html: str, playlist_id: str) -> PageState:
    """
    Normalise the first page of a playlist.

    A page without a video list but with an alert (private, deleted or
    nonexistent playlist) raises VideoUnavailable; any other missing list
    raises YouTubeDataUnparsable.
    """
    data = extract_json_assignment(html, "ytInitialData", identifier=playlist_id)

    renderer = next(_find_key(data, "playlistVideoListRenderer"), None)
    if not isinstance(renderer, dict):
        if data.get("alerts"):
            raise VideoUnavailable(playlist_id)
        raise YouTubeDataUnparsable(playlist_id)

    video_ids, continuation = _entries(renderer.get("contents"))
    return PageState(
        title=_text_of(_dig(data, "metadata", "playlistMetadataRenderer", "title")),
        video_ids=tuple(video_ids),
        continuation=continuation,
        api_key=extract_ytcfg_value(html, "INNERTUBE_API_KEY"),
        client_version=extract_ytcfg_value(html, "INNERTUBE_CLIENT_VERSION"),
    )


def parse_continuation_response(data: Dict[str, Any], playlist_id: str) -> PageState:
    """
    Normalise one InnerTube `browse` continuation response.

    A response with no continuation actions at all is a layout we do not
    understand and raises YouTubeDataUnparsable.
    """
    actions = data.get("onResponseReceivedActions")
    if not isinstance(actions, list):
        raise YouTubeDataUnparsable(playlist_id)

    video_ids: List[str] = []
    continuation: Optional[str] = None
    for action in actions:
        items = _dig(action, "appendContinuationItemsAction", "continuationItems")
        if items is None:
            items = _dig(action, "reloadContinuationItemsCommand", "continuationItems")
        ids, token = _entries(items)
        video_ids.extend(ids)
        continuation = token or continuation

    return PageState(video_ids=tuple(video_ids), continuation=continuation)
