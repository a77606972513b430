"""Unit tests for playlist batch orchestration and failure classification."""

import pytest

from tests.conftest import PLAYLIST_ID, continuation_response, playlist_html
from ytt.batch.collector import BatchCollector
from ytt.batch.runner import run_playlist
from ytt.batch.schema import FailureType, VideoResult, classify_error, failure_from_error
from ytt.transcripts.errors import (
    HttpError,
    InvalidPlaylistId,
    IoError,
    IpBlocked,
    NoTranscriptFound,
    TranscriptError,
    VideoUnavailable,
    XmlParseError,
)


IDS = ["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"]


@pytest.mark.parametrize(
    "error, expected",
    [
        (InvalidPlaylistId("x"), FailureType.INPUT_ERROR),
        (IpBlocked("x"), FailureType.SOURCE_ERROR),
        (HttpError("boom", status_code=500), FailureType.SOURCE_ERROR),
        (NoTranscriptFound("x", ["en"]), FailureType.AVAILABILITY_ERROR),
        (VideoUnavailable("x"), FailureType.AVAILABILITY_ERROR),
        (XmlParseError("bad"), FailureType.EXTRACTION_ERROR),
        (IoError("disk"), FailureType.OUTPUT_ERROR),
        (TranscriptError("other"), FailureType.SOURCE_ERROR),
    ],
)
def test_classify_error(error, expected):
    failure_type, fixes = classify_error(error)
    assert failure_type == expected
    assert fixes


def test_failure_from_error_records_class_and_cause():
    failure = failure_from_error("aaaaaaaaaaa", VideoUnavailable("aaaaaaaaaaa"))
    assert failure.error_class == "VideoUnavailable"
    assert failure.cause == "Video unavailable: aaaaaaaaaaa"


def test_collector_rejects_duplicate_positions():
    collector = BatchCollector(PLAYLIST_ID, "run")
    collector.add_result(VideoResult(video_id="a", index=1, success=True))
    with pytest.raises(ValueError):
        collector.add_result(VideoResult(video_id="b", index=1, success=True))


def test_report_counts_and_deduplicated_fixes():
    collector = BatchCollector(PLAYLIST_ID, "run")
    collector.add_result(VideoResult(video_id="a", index=1, success=True))
    for index, video_id in ((2, "b"), (3, "c")):
        collector.add_result(
            VideoResult(
                video_id=video_id,
                index=index,
                success=False,
                failure=failure_from_error(video_id, IpBlocked(video_id)),
            )
        )

    report = collector.build_report()

    assert collector.has_failures()
    assert (report.total, report.succeeded, report.failed) == (3, 1, 2)
    assert report.suggested_fixes() == ["Increase --delay", "Retry later or from another network"]


@pytest.mark.asyncio
async def test_run_playlist_continues_after_a_failure(fake_youtube, make_api):
    fake_youtube.playlists[PLAYLIST_ID] = playlist_html(IDS[:2], token="next")
    fake_youtube.continuations["next"] = continuation_response(IDS[2:])
    calls = []

    async def handler(video_id, index, total):
        calls.append((video_id, index, total))
        if video_id == "bbbbbbbbbbb":
            raise NoTranscriptFound(video_id, ["en"])

    async with make_api() as api:
        report = await run_playlist(api, f"https://www.youtube.com/playlist?list={PLAYLIST_ID}", handler)

    assert calls == [(IDS[0], 1, 3), (IDS[1], 2, 3), (IDS[2], 3, 3)]
    assert report.playlist_id == PLAYLIST_ID
    assert report.run_id == api.run_id
    assert [r.success for r in report.results] == [True, False, True]
    assert report.results[1].failure.type == FailureType.AVAILABILITY_ERROR
    assert all(r.execution_time_ms is not None for r in report.results)


@pytest.mark.asyncio
async def test_run_playlist_respects_max_videos(fake_youtube, make_api):
    fake_youtube.playlists[PLAYLIST_ID] = playlist_html(IDS)
    seen = []

    async def handler(video_id, index, total):
        seen.append((index, total))

    async with make_api() as api:
        report = await run_playlist(api, PLAYLIST_ID, handler, max_videos=2)

    assert seen == [(1, 2), (2, 2)]
    assert report.discovered == 3
    assert report.total == 2


@pytest.mark.asyncio
async def test_run_playlist_enumeration_failure_propagates(fake_youtube, make_api):
    fake_youtube.playlists[PLAYLIST_ID] = playlist_html([], alerts=True, renderable=False)

    async def handler(video_id, index, total):
        raise AssertionError("handler must not run")

    async with make_api() as api:
        with pytest.raises(VideoUnavailable):
            await run_playlist(api, PLAYLIST_ID, handler)


@pytest.mark.asyncio
async def test_run_playlist_rejects_bad_input(make_api):
    async def handler(video_id, index, total):
        pass

    async with make_api() as api:
        with pytest.raises(InvalidPlaylistId):
            await run_playlist(api, "not a playlist!", handler)
        with pytest.raises(ValueError):
            await run_playlist(api, PLAYLIST_ID, handler, max_videos=-1)
