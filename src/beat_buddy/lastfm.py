import hashlib
import json
import logging
import sqlite3
import threading
from typing import Any, Callable, Dict, List, Optional

import pylast

from .exceptions import BackendOperationError

logger = logging.getLogger(__name__)

MAX_SEARCH_PAGES = 10


class LastFMCache:
    """Simple cache to store LastFM responses to minimize API traffic."""

    def __init__(self, cache_file: str = 'lastfm_cache.db') -> None:
        """Initializes the LastFMCache with an SQLite database.

        Args:
            cache_file: Path to the SQLite database file, or ``:memory:``.
        """
        self.cache_file = cache_file
        self.connection = sqlite3.connect(self.cache_file, check_same_thread=False)
        self.lock = threading.Lock()
        self._init_db()

    def _init_db(self) -> None:
        """Initializes the database and creates tables if they don't exist."""
        with self.connection as conn:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS cache (
                    key TEXT PRIMARY KEY,
                    data TEXT
                )
            ''')

    def get_cache_key(self, operation: str, *args: Any) -> str:
        """Generates a unique cache key for an operation and its arguments.

        Args:
            operation: Name of the LastFM operation.
            *args: Arguments the operation was called with.

        Returns:
            A unique cache key.
        """
        key = json.dumps([operation, *[str(a).lower() for a in args]])
        return hashlib.md5(key.encode('utf-8')).hexdigest()

    def get(self, operation: str, *args: Any) -> Optional[Any]:
        """Retrieves cached data for an operation call.

        Returns:
            The cached result, or None if not in cache.
        """
        key = self.get_cache_key(operation, *args)
        with self.lock:
            row = self.connection.execute('SELECT data FROM cache WHERE key = ?', (key,)).fetchone()
        if row:
            logger.debug(f"Retrieved from cache: {operation}{args}")
            return json.loads(row[0])
        return None

    def set(self, operation: str, args: tuple, data: Any) -> None:
        """Caches the result of an operation call.

        Args:
            operation: Name of the LastFM operation.
            args: Arguments the operation was called with.
            data: JSON-serialisable result.
        """
        key = self.get_cache_key(operation, *args)
        try:
            with self.lock, self.connection:
                self.connection.execute(
                    'INSERT OR REPLACE INTO cache (key, data) VALUES (?, ?)',
                    (key, json.dumps(data)),
                )
            logger.debug(f"Cached data for {operation}{args}")
        except sqlite3.Error as e:
            logger.error(f"Failed to set cache for {operation}{args}: {e}")

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> 'LastFMCache':
        """Enter the runtime context for this object."""
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        """Exit the runtime context, clean up resources."""
        self.close()


def _artist_name(item: Any) -> Optional[str]:
    artist = getattr(item, 'artist', None)
    return getattr(artist, 'name', None) if artist is not None else None


def _track_record(track: pylast.Track) -> Dict[str, Any]:
    return {'title': track.title, 'artist': _artist_name(track)}


def _collect_pages(search: Any, limit: int) -> List[Any]:
    """Gathers search results page by page until ``limit`` items are found.

    Last.fm search pages hold 30 results, so larger limits need more pages.
    Stops at an empty page or after MAX_SEARCH_PAGES requests.
    """
    results: List[Any] = []
    for _ in range(MAX_SEARCH_PAGES):
        page = search.get_next_page()
        if not page:
            break
        results.extend(page)
        if len(results) >= limit:
            break
    return results[:limit]


class LastFM:
    """Client to interact with the LastFM API using pylast."""

    def __init__(
        self,
        api_key: Optional[str],
        api_secret: Optional[str] = None,
        cache: Optional[LastFMCache] = None,
        network: Optional[pylast.LastFMNetwork] = None,
    ) -> None:
        """Initializes the LastFM client.

        Args:
            api_key: LastFM API key. Without it every lookup fails.
            api_secret: LastFM API secret (optional for read-only calls).
            cache: Response cache; defaults to ``lastfm_cache.db``.
            network: Pre-built pylast network, mostly for tests.
        """
        self.network: Optional[pylast.LastFMNetwork] = network
        if self.network is None and api_key:
            self.network = pylast.LastFMNetwork(api_key=api_key, api_secret=api_secret or '')
        self.cache = cache if cache is not None else LastFMCache()

    def _cached(self, operation: str, args: tuple, fetch: Callable[[], Any]) -> Any:
        if self.network is None:
            logger.error("Network is not initialized")
            raise BackendOperationError("LastFM network is not configured (missing API key)")

        cached_result = self.cache.get(operation, *args)
        if cached_result is not None:
            logger.debug(f"Cache hit for {operation}{args}")
            return cached_result

        try:
            result = fetch()
        except pylast.WSError as e:
            logger.warning(f"LastFM rejected {operation}{args}: {e}")
            raise BackendOperationError(f"LastFM {operation} failed: {e}") from e
        except pylast.PyLastError as e:
            logger.error(f"LastFM {operation}{args} failed: {e}")
            raise BackendOperationError(f"LastFM {operation} failed: {e}") from e

        self.cache.set(operation, args, result)
        return result

    def search_track(self, song_title: str, limit: int) -> List[Dict[str, Any]]:
        """Searches tracks by title.

        Returns:
            Up to ``limit`` dictionaries with title and artist.
        """
        def fetch() -> List[Dict[str, Any]]:
            tracks = _collect_pages(self.network.search_for_track('', song_title), limit)
            return [_track_record(t) for t in tracks]

        return self._cached('track.search', (song_title, limit), fetch)

    def get_track_info(self, artist: str, song_title: str) -> Dict[str, Any]:
        """Gets details for one track: album, duration, listeners, play count and tags."""
        def fetch() -> Dict[str, Any]:
            track = self.network.get_track(artist, song_title)
            album = track.get_album()
            duration_ms = track.get_duration()
            return {
                'title': track.get_title(),
                'artist': _artist_name(track),
                'album': album.title if album else None,
                'duration_seconds': duration_ms // 1000 if duration_ms else None,
                'listeners': track.get_listener_count(),
                'playcount': track.get_playcount(),
                'tags': [top.item.get_name() for top in track.get_top_tags(limit=5)],
                'url': track.get_url(),
            }

        return self._cached('track.getInfo', (artist, song_title), fetch)

    def get_similar_tracks(self, artist: str, song_title: str, limit: int) -> List[Dict[str, Any]]:
        """Gets similar tracks from Last.fm based on a given track.

        Returns:
            A list of dictionaries representing similar tracks.
        """
        def fetch() -> List[Dict[str, Any]]:
            similar = self.network.get_track(artist, song_title).get_similar(limit=limit)
            formatted = []
            for similar_track in similar:
                if isinstance(similar_track.item, pylast.Track):
                    record = _track_record(similar_track.item)
                    record['match'] = similar_track.match
                    formatted.append(record)
                else:
                    logger.warning(f"Unexpected similar track item type: {type(similar_track.item)}")
            return formatted[:limit]

        return self._cached('track.getSimilar', (artist, song_title, limit), fetch)

    def get_album_info(self, artist: str, album_title: str) -> Dict[str, Any]:
        """Gets details for one album, including its track listing."""
        def fetch() -> Dict[str, Any]:
            album = self.network.get_album(artist, album_title)
            return {
                'title': album.get_title(),
                'artist': _artist_name(album),
                'listeners': album.get_listener_count(),
                'playcount': album.get_playcount(),
                'tracks': [t.title for t in album.get_tracks()],
                'url': album.get_url(),
            }

        return self._cached('album.getInfo', (artist, album_title), fetch)

    def search_album(self, album_title: str, limit: int) -> List[Dict[str, Any]]:
        def fetch() -> List[Dict[str, Any]]:
            albums = _collect_pages(self.network.search_for_album(album_title), limit)
            return [{'title': a.title, 'artist': _artist_name(a)} for a in albums]

        return self._cached('album.search', (album_title, limit), fetch)

    def get_tag_top_tracks(self, tag: str, limit: int) -> List[Dict[str, Any]]:
        def fetch() -> List[Dict[str, Any]]:
            top = self.network.get_tag(tag).get_top_tracks(limit=limit)
            return [dict(_track_record(t.item), weight=t.weight) for t in top[:limit]]

        return self._cached('tag.getTopTracks', (tag, limit), fetch)

    def get_tag_top_artists(self, tag: str, limit: int) -> List[Dict[str, Any]]:
        def fetch() -> List[Dict[str, Any]]:
            top = self.network.get_tag(tag).get_top_artists(limit=limit)
            return [{'artist': t.item.name, 'weight': t.weight} for t in top[:limit]]

        return self._cached('tag.getTopArtists', (tag, limit), fetch)

    def __enter__(self) -> 'LastFM':
        """Enter the runtime context for this object."""
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        """Exit the runtime context, clean up resources."""
        self.cache.__exit__(exc_type, exc_value, traceback)
