"""ytt: fetch YouTube transcripts and enumerate playlists without an API key."""

from ytt.transcripts import *  # noqa: F401,F403
from ytt.transcripts import __all__

__version__ = "0.1.0"
