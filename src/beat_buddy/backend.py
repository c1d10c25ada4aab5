"""
Music Backend serving the catalog operations.

Lookups go to Last.fm in a worker thread; playlist mutations stay in process.
"""

import asyncio
import logging
from typing import Any, Dict, List

from .lastfm import LastFM
from .playlist import Playlist

logger = logging.getLogger(__name__)


class MusicBackend:
    """Async facade over the LastFM client and the playlist store."""

    def __init__(self, lastfm: LastFM, playlist: Playlist):
        """Initialize with configured collaborators.

        Args:
            lastfm: LastFM client used for all lookups
            playlist: Playlist store used by the playlist operations
        """
        self.lastfm = lastfm
        self.playlist = playlist

    async def search_track(self, song_title: str, limit: int) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.lastfm.search_track, song_title, limit)

    async def get_track_info(self, artist: str, song_title: str) -> Dict[str, Any]:
        return await asyncio.to_thread(self.lastfm.get_track_info, artist, song_title)

    async def get_related_tracks(self, artist: str, song_title: str, limit: int) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.lastfm.get_similar_tracks, artist, song_title, limit)

    async def get_album_info(self, artist: str, album_title: str) -> Dict[str, Any]:
        return await asyncio.to_thread(self.lastfm.get_album_info, artist, album_title)

    async def search_album(self, album_title: str, limit: int) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.lastfm.search_album, album_title, limit)

    async def get_tags_top_tracks(self, tag: str, limit: int) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.lastfm.get_tag_top_tracks, tag, limit)

    async def get_tags_top_artists(self, tag: str, limit: int) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.lastfm.get_tag_top_artists, tag, limit)

    async def add_to_playlist(self, song_title: str, artist: str) -> Dict[str, Any]:
        return self.playlist.add(song_title, artist)

    async def delete_from_playlist(self, song_title: str, artist: str) -> Dict[str, Any]:
        return self.playlist.remove(song_title, artist)

    async def print_playlist(self) -> List[Dict[str, str]]:
        """List the playlist as song title and artist pairs."""
        entries = self.playlist.entries()
        logger.debug(f"Playlist has {len(entries)} tracks")
        return entries
