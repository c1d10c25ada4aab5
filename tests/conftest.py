"""
Pytest configuration for the Beat Buddy test suite.

Puts the src directory on the Python path so tests run without an install,
and provides fixtures for a mocked Music Backend and scripted OpenAI replies.
"""
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

src_dir = Path(__file__).parent.parent / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))


def build_completion(content=None, function_call=None):
    """Build an object shaped like an OpenAI ChatCompletion.

    Args:
        content: Assistant text, or None
        function_call: Optional (name, arguments_json) tuple
    """
    call = None
    if function_call is not None:
        call = SimpleNamespace(name=function_call[0], arguments=function_call[1])
    message = SimpleNamespace(role="assistant", content=content, function_call=call)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=message, finish_reason="stop")],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5),
    )


@pytest.fixture
def mock_backend():
    """Mocked MusicBackend with every catalog coroutine as AsyncMock."""
    backend = MagicMock()
    backend.search_track = AsyncMock(return_value=[{"title": "Yesterday", "artist": "The Beatles"}])
    backend.get_track_info = AsyncMock(return_value={"title": "Yesterday", "artist": "The Beatles"})
    backend.get_related_tracks = AsyncMock(return_value=[])
    backend.get_album_info = AsyncMock(return_value={"title": "Help!", "artist": "The Beatles"})
    backend.search_album = AsyncMock(return_value=[])
    backend.get_tags_top_tracks = AsyncMock(return_value=[])
    backend.get_tags_top_artists = AsyncMock(return_value=[])
    backend.add_to_playlist = AsyncMock(return_value={"status": "added", "count": 1})
    backend.delete_from_playlist = AsyncMock(return_value={"status": "removed", "count": 0})
    backend.print_playlist = AsyncMock(return_value=[])
    return backend


@pytest.fixture
def mock_openai_client():
    """Mocked AsyncOpenAI client; set ``chat.completions.create.side_effect``."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def make_completion():
    """Factory fixture for fake ChatCompletion objects."""
    return build_completion
