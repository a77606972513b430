"""Unit tests for destination resolution and the output writer."""

from pathlib import Path

import pytest

from ytt.output.destination import STDOUT, OutputDestination, resolve_destination, sanitize_filename
from ytt.output.writer import write_output
from ytt.transcripts.errors import IoError, YouTubeDataUnparsable


VIDEO_ID = "dQw4w9WgXcQ"


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Hello, World! 2024", "Hello_World_2024"),
        ("  spaced   out  ", "spaced_out"),
        ("a/b\\c:d", "a_b_c_d"),
        ("keep-this_and.that", "keep-this_and.that"),
        ("trailing?", "trailing"),
    ],
)
def test_sanitize_filename(title, expected):
    assert sanitize_filename(title) == expected


def test_sanitize_filename_caps_length():
    assert len(sanitize_filename("x" * 500)) == 200


def test_no_output_goes_to_stdout():
    destination = resolve_destination(None, format_name="text", video_id=VIDEO_ID)
    assert destination is STDOUT
    assert destination.is_stdout
    assert str(destination) == "<stdout>"


def test_title_without_output_uses_sanitized_title():
    destination = resolve_destination(None, format_name="md", video_id=VIDEO_ID, title="My Talk!", use_title=True)
    assert destination.path == Path("My_Talk.md")


def test_title_required_but_missing():
    with pytest.raises(YouTubeDataUnparsable):
        resolve_destination(None, format_name="text", video_id=VIDEO_ID, use_title=True)


def test_playlist_without_output_uses_video_id():
    destination = resolve_destination(None, format_name="srt", video_id=VIDEO_ID, playlist_mode=True)
    assert destination.path == Path(f"{VIDEO_ID}.srt")


def test_existing_directory_with_title(tmp_path):
    destination = resolve_destination(
        str(tmp_path), format_name="json", video_id=VIDEO_ID, title="Talk", use_title=True
    )
    assert destination.path == tmp_path / "Talk.json"


def test_directory_in_playlist_mode(tmp_path):
    destination = resolve_destination(f"{tmp_path}/out/", format_name="text", video_id=VIDEO_ID, playlist_mode=True)
    assert destination.path == tmp_path / "out" / f"{VIDEO_ID}.txt"


def test_file_in_playlist_mode_gets_video_id_suffix(tmp_path):
    destination = resolve_destination(
        str(tmp_path / "notes.md"), format_name="markdown", video_id=VIDEO_ID, playlist_mode=True
    )
    assert destination.path == tmp_path / f"notes_{VIDEO_ID}.md"


def test_file_path_is_used_as_given(tmp_path):
    target = tmp_path / "transcript.txt"
    destination = resolve_destination(str(target), format_name="json", video_id=VIDEO_ID)
    assert destination.path == target


def test_write_output_to_file(tmp_path):
    target = tmp_path / "out.txt"
    write_output("Grüße\n", OutputDestination(target))
    assert target.read_text(encoding="utf-8") == "Grüße\n"


def test_write_output_to_stdout(capsys):
    write_output("Hello\n", STDOUT)
    assert capsys.readouterr().out == "Hello\n"


def test_write_output_failure_is_io_error(tmp_path):
    with pytest.raises(IoError) as exc_info:
        write_output("x", OutputDestination(tmp_path / "missing" / "out.txt"))
    assert str(exc_info.value).startswith("IO error: Failed to create file")
