"""Unit tests for playlist enumeration across continuation pages."""

import json
import logging

import httpx
import pytest

from tests.conftest import PLAYLIST_ID, FakeYouTube, continuation_response, playlist_html
from ytt.transcripts.errors import HttpError, VideoUnavailable, YouTubeDataUnparsable
from ytt.transcripts.http_client import PageClient
from ytt.transcripts.playlist import DEFAULT_CLIENT_VERSION, PlaylistTraverser, build_browse_payload


LOGGER = logging.getLogger("ytt.test.playlist")


def traverser_for(fake: FakeYouTube) -> PlaylistTraverser:
    return PlaylistTraverser(PageClient(LOGGER, 0, http_client=fake.client()), LOGGER)


def test_browse_payload_falls_back_to_default_client_version():
    payload = build_browse_payload("tok", None)
    assert payload["continuation"] == "tok"
    assert payload["context"]["client"]["clientName"] == "WEB"
    assert payload["context"]["client"]["clientVersion"] == DEFAULT_CLIENT_VERSION


@pytest.mark.asyncio
async def test_single_page_playlist(fake_youtube):
    fake_youtube.playlists[PLAYLIST_ID] = playlist_html(["aaaaaaaaaaa", "bbbbbbbbbbb"])

    ids = await traverser_for(fake_youtube).get_video_ids(PLAYLIST_ID)

    assert ids == ["aaaaaaaaaaa", "bbbbbbbbbbb"]
    assert len(fake_youtube.requests) == 1


@pytest.mark.asyncio
async def test_continuations_are_followed_in_order(fake_youtube):
    fake_youtube.playlists[PLAYLIST_ID] = playlist_html(["aaaaaaaaaaa"], token="page-2")
    fake_youtube.continuations["page-2"] = continuation_response(["bbbbbbbbbbb", "aaaaaaaaaaa"], token="page-3")
    fake_youtube.continuations["page-3"] = continuation_response(["ccccccccccc"])

    ids = await traverser_for(fake_youtube).get_video_ids(PLAYLIST_ID)

    # Duplicates are kept as listed
    assert ids == ["aaaaaaaaaaa", "bbbbbbbbbbb", "aaaaaaaaaaa", "ccccccccccc"]
    assert len(fake_youtube.requests) == 3


@pytest.mark.asyncio
async def test_continuation_request_carries_token_key_and_client_version(fake_youtube):
    fake_youtube.playlists[PLAYLIST_ID] = playlist_html(["aaaaaaaaaaa"], token="page-2")
    fake_youtube.continuations["page-2"] = continuation_response(["bbbbbbbbbbb"])

    await traverser_for(fake_youtube).get_video_ids(PLAYLIST_ID)

    browse = fake_youtube.requests[1]
    assert browse.method == "POST"
    assert browse.url.params["key"] == "test-key"
    assert browse.url.params["prettyPrint"] == "false"
    body = json.loads(browse.content)
    assert body["continuation"] == "page-2"
    assert body["context"]["client"]["clientVersion"] == "2.20250101.00.00"


@pytest.mark.asyncio
async def test_repeated_token_is_unparsable(fake_youtube):
    fake_youtube.playlists[PLAYLIST_ID] = playlist_html(["aaaaaaaaaaa"], token="loop")
    fake_youtube.continuations["loop"] = continuation_response(["bbbbbbbbbbb"], token="loop")

    with pytest.raises(YouTubeDataUnparsable):
        await traverser_for(fake_youtube).get_video_ids(PLAYLIST_ID)


@pytest.mark.asyncio
async def test_missing_playlist_is_unavailable(fake_youtube):
    fake_youtube.playlists[PLAYLIST_ID] = playlist_html([], alerts=True, renderable=False)

    with pytest.raises(VideoUnavailable):
        await traverser_for(fake_youtube).get_video_ids(PLAYLIST_ID)


@pytest.mark.asyncio
async def test_first_page_failure_propagates_even_when_partial_allowed(fake_youtube):
    fake_youtube.playlists[PLAYLIST_ID] = httpx.Response(500, text="boom")

    with pytest.raises(HttpError):
        await traverser_for(fake_youtube).get_video_ids(PLAYLIST_ID, allow_partial=True)


@pytest.mark.asyncio
async def test_later_page_failure_propagates_by_default(fake_youtube):
    fake_youtube.playlists[PLAYLIST_ID] = playlist_html(["aaaaaaaaaaa"], token="page-2")
    fake_youtube.continuations["page-2"] = httpx.Response(500, text="boom")

    with pytest.raises(HttpError):
        await traverser_for(fake_youtube).get_video_ids(PLAYLIST_ID)


@pytest.mark.asyncio
async def test_later_page_failure_returns_partial_when_allowed(fake_youtube):
    fake_youtube.playlists[PLAYLIST_ID] = playlist_html(["aaaaaaaaaaa"], token="page-2")
    fake_youtube.continuations["page-2"] = continuation_response(["bbbbbbbbbbb"], token="page-3")
    fake_youtube.continuations["page-3"] = httpx.Response(500, text="boom")

    ids = await traverser_for(fake_youtube).get_video_ids(PLAYLIST_ID, allow_partial=True)

    assert ids == ["aaaaaaaaaaa", "bbbbbbbbbbb"]
