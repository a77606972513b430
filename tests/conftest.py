# tests/conftest.py
"""Shared fixtures: page builders and an in-memory YouTube served through httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from ytt.transcripts.core import YouTubeTranscript
from ytt.transcripts.schema import FetchConfig


VIDEO_ID = "dQw4w9WgXcQ"
PLAYLIST_ID = "PLabcdefghijklmnop"

TIMEDTEXT_URL = "https://www.youtube.com/api/timedtext"

SIMPLE_XML = (
    '<?xml version="1.0" encoding="utf-8" ?><transcript>'
    '<text start="0.0" dur="1.5">Hello</text>'
    '<text start="1.5" dur="2.0">world &amp;amp; friends</text>'
    "</transcript>"
)


def caption_track(
    code: str,
    name: str,
    *,
    kind: Optional[str] = None,
    translatable: bool = True,
    video_id: str = VIDEO_ID,
    extra_query: str = "",
) -> Dict[str, Any]:
    track: Dict[str, Any] = {
        "baseUrl": f"{TIMEDTEXT_URL}?v={video_id}&lang={code}{extra_query}",
        "name": {"runs": [{"text": name}]},
        "languageCode": code,
        "isTranslatable": translatable,
    }
    if kind:
        track["kind"] = kind
    return track


def player_response(
    tracks: Optional[List[Dict[str, Any]]] = None,
    *,
    translation_languages: Optional[List[Dict[str, Any]]] = None,
    status: str = "OK",
    reason: Optional[str] = None,
    subreasons: Optional[List[str]] = None,
    title: Optional[str] = "Test Video",
    with_captions: bool = True,
) -> Dict[str, Any]:
    playability: Dict[str, Any] = {"status": status}
    if reason:
        playability["reason"] = reason
    if subreasons:
        playability["errorScreen"] = {
            "playerErrorMessageRenderer": {"subreason": {"runs": [{"text": s} for s in subreasons]}}
        }

    data: Dict[str, Any] = {"playabilityStatus": playability}
    if title is not None:
        data["videoDetails"] = {"videoId": VIDEO_ID, "title": title}
    if with_captions:
        data["captions"] = {
            "playerCaptionsTracklistRenderer": {
                "captionTracks": tracks if tracks is not None else [caption_track("en", "English")],
                "translationLanguages": translation_languages
                if translation_languages is not None
                else [
                    {"languageCode": "de", "languageName": {"simpleText": "German"}},
                    {"languageCode": "fr", "languageName": {"runs": [{"text": "French"}]}},
                ],
            }
        }
    return data


def watch_html(player: Dict[str, Any]) -> str:
    return (
        "<!DOCTYPE html><html><head>"
        '<script>ytcfg.set({"INNERTUBE_API_KEY": "test-key", "INNERTUBE_CLIENT_VERSION": "2.20250101.00.00"});</script>'
        f"<script>var ytInitialPlayerResponse = {json.dumps(player)};var meta = {{}};</script>"
        "</head><body></body></html>"
    )


def playlist_item(video_id: str) -> Dict[str, Any]:
    return {"playlistVideoRenderer": {"videoId": video_id}}


def continuation_item(token: str) -> Dict[str, Any]:
    return {
        "continuationItemRenderer": {
            "continuationEndpoint": {"continuationCommand": {"token": token, "request": "CONTINUATION_REQUEST_TYPE_BROWSE"}}
        }
    }


def playlist_html(video_ids: List[str], token: Optional[str] = None, *, alerts: bool = False, renderable: bool = True) -> str:
    data: Dict[str, Any] = {}
    if renderable:
        contents: List[Dict[str, Any]] = [playlist_item(v) for v in video_ids]
        if token:
            contents.append(continuation_item(token))
        data["contents"] = {
            "twoColumnBrowseResultsRenderer": {
                "tabs": [
                    {
                        "tabRenderer": {
                            "content": {
                                "sectionListRenderer": {
                                    "contents": [
                                        {
                                            "itemSectionRenderer": {
                                                "contents": [{"playlistVideoListRenderer": {"contents": contents}}]
                                            }
                                        }
                                    ]
                                }
                            }
                        }
                    }
                ]
            }
        }
    if alerts:
        data["alerts"] = [{"alertRenderer": {"type": "ERROR", "text": {"simpleText": "The playlist does not exist."}}}]
    return (
        "<html><script>"
        '"INNERTUBE_API_KEY":"test-key","INNERTUBE_CLIENT_VERSION":"2.20250101.00.00"'
        f"</script><script>var ytInitialData = {json.dumps(data)};</script></html>"
    )


def continuation_response(video_ids: List[str], token: Optional[str] = None) -> Dict[str, Any]:
    items: List[Dict[str, Any]] = [playlist_item(v) for v in video_ids]
    if token:
        items.append(continuation_item(token))
    return {"onResponseReceivedActions": [{"appendContinuationItemsAction": {"continuationItems": items}}]}


class FakeYouTube:
    """
    Minimal in-memory YouTube.

    Pages are registered per path; every request is recorded for assertions.
    A registered value may be a callable taking the request.
    """

    def __init__(self) -> None:
        self.watch: Dict[str, Any] = {}
        self.timedtext: Dict[str, Any] = {}
        self.playlists: Dict[str, Any] = {}
        self.continuations: Dict[str, Any] = {}
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        params = request.url.params

        if path == "/watch":
            return self._respond(self.watch.get(params.get("v")), request)
        if path == "/api/timedtext":
            key = params.get("lang", "")
            if params.get("tlang"):
                key = f"{key}->{params.get('tlang')}"
            return self._respond(self.timedtext.get(key), request)
        if path == "/playlist":
            return self._respond(self.playlists.get(params.get("list")), request)
        if path == "/youtubei/v1/browse":
            token = json.loads(request.content)["continuation"]
            return self._respond(self.continuations.get(token), request)
        return httpx.Response(404, text="not found")

    @staticmethod
    def _respond(value: Any, request: httpx.Request) -> httpx.Response:
        if value is None:
            return httpx.Response(404, text="not found")
        if callable(value):
            value = value(request)
        if isinstance(value, httpx.Response):
            return value
        if isinstance(value, dict):
            return httpx.Response(200, json=value)
        return httpx.Response(200, text=value)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_youtube() -> FakeYouTube:
    return FakeYouTube()


@pytest.fixture
def make_api(fake_youtube: FakeYouTube) -> Callable[..., YouTubeTranscript]:
    """Factory for a facade wired to fake_youtube with no request delay."""

    def factory(**config: Any) -> YouTubeTranscript:
        config.setdefault("delay_ms", 0)
        return YouTubeTranscript(FetchConfig(**config), http_client=fake_youtube.client())

    return factory
