"""In-process playlist store backing the playlist functions."""

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class Playlist:
    """Ordered list of tracks, identified by song title and artist."""

    def __init__(self) -> None:
        """Initializes an empty playlist."""
        self.tracks: List[Dict[str, str]] = []

    def _find(self, song_title: str, artist: str) -> Optional[int]:
        key = (song_title.strip().lower(), artist.strip().lower())
        for index, track in enumerate(self.tracks):
            if (track['songTitle'].lower(), track['artist'].lower()) == key:
                return index
        return None

    def add(self, song_title: str, artist: str) -> Dict[str, Any]:
        """Adds a track unless it is already in the playlist.

        Args:
            song_title: Title of the song.
            artist: Name of the artist.

        Returns:
            Confirmation with the resulting status and track count.
        """
        if self._find(song_title, artist) is not None:
            logger.debug(f"Track already in playlist: {artist} - {song_title}")
            status = 'already_present'
        else:
            self.tracks.append({'songTitle': song_title.strip(), 'artist': artist.strip()})
            logger.info(f"Added to playlist: {artist} - {song_title}")
            status = 'added'
        return {'status': status, 'songTitle': song_title, 'artist': artist, 'count': len(self.tracks)}

    def remove(self, song_title: str, artist: str) -> Dict[str, Any]:
        """Removes a track from the playlist.

        Args:
            song_title: Title of the song.
            artist: Name of the artist.

        Returns:
            Confirmation with status ``removed`` or ``not_found``.
        """
        index = self._find(song_title, artist)
        if index is None:
            logger.warning(f"Track not in playlist: {artist} - {song_title}")
            status = 'not_found'
        else:
            del self.tracks[index]
            logger.info(f"Removed from playlist: {artist} - {song_title}")
            status = 'removed'
        return {'status': status, 'songTitle': song_title, 'artist': artist, 'count': len(self.tracks)}

    def entries(self) -> List[Dict[str, str]]:
        """Returns a copy of the playlist entries (song title and artist only)."""
        return [dict(track) for track in self.tracks]

    def __len__(self) -> int:
        return len(self.tracks)
