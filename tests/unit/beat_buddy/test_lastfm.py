"""Tests for the LastFM client and its SQLite cache (pylast mocked)."""
from types import SimpleNamespace
from unittest.mock import MagicMock

import pylast
import pytest

from beat_buddy.exceptions import BackendOperationError
from beat_buddy.lastfm import LastFM, LastFMCache


def fake_track(title, artist):
    track = MagicMock(spec=pylast.Track)
    track.title = title
    track.artist = SimpleNamespace(name=artist)
    return track


@pytest.fixture
def cache():
    with LastFMCache(":memory:") as cache:
        yield cache


@pytest.fixture
def network():
    return MagicMock()


@pytest.fixture
def lastfm(network, cache):
    return LastFM(api_key=None, network=network, cache=cache)


class TestLastFMCache:

    def test_miss_returns_none(self, cache):
        assert cache.get("track.search", "Yesterday", 5) is None

    def test_round_trip_and_empty_results(self, cache):
        cache.set("track.search", ("Yesterday", 5), [{"title": "Yesterday"}])
        cache.set("album.search", ("Nothing", 5), [])

        assert cache.get("track.search", "Yesterday", 5) == [{"title": "Yesterday"}]
        assert cache.get("album.search", "Nothing", 5) == []

    def test_key_is_case_insensitive_and_argument_sensitive(self, cache):
        assert cache.get_cache_key("track.search", "Yesterday", 5) == cache.get_cache_key("track.search", "yesterday", 5)
        assert cache.get_cache_key("track.search", "Yesterday", 5) != cache.get_cache_key("track.search", "Yesterday", 6)
        assert cache.get_cache_key("track.search", "a") != cache.get_cache_key("album.search", "a")


class TestLastFM:

    def test_search_track_limits_results(self, lastfm, network):
        network.search_for_track.return_value.get_next_page.return_value = [
            fake_track("Yesterday", "The Beatles"),
            fake_track("Yesterday", "Leona Lewis"),
            fake_track("Yesterday Once More", "Carpenters"),
        ]

        result = lastfm.search_track("Yesterday", 2)

        network.search_for_track.assert_called_once_with("", "Yesterday")
        assert result == [
            {"title": "Yesterday", "artist": "The Beatles"},
            {"title": "Yesterday", "artist": "Leona Lewis"},
        ]

    def test_search_track_reads_further_pages(self, lastfm, network):
        pages = [
            [fake_track(f"Yesterday {i}", "Various") for i in range(30)],
            [fake_track(f"Yesterday {i}", "Various") for i in range(30, 60)],
        ]
        network.search_for_track.return_value.get_next_page.side_effect = pages

        result = lastfm.search_track("Yesterday", 40)

        assert len(result) == 40
        assert result[-1] == {"title": "Yesterday 39", "artist": "Various"}
        assert network.search_for_track.return_value.get_next_page.call_count == 2

    def test_search_stops_at_empty_page(self, lastfm, network):
        network.search_for_album.return_value.get_next_page.side_effect = [
            [SimpleNamespace(title="Help!", artist=SimpleNamespace(name="The Beatles"))],
            [],
        ]

        assert lastfm.search_album("Help!", 50) == [{"title": "Help!", "artist": "The Beatles"}]
        assert network.search_for_album.return_value.get_next_page.call_count == 2

    def test_cache_hit_skips_network(self, lastfm, network):
        network.search_for_track.return_value.get_next_page.side_effect = [[fake_track("Creep", "Radiohead")], []]

        first = lastfm.search_track("Creep", 5)
        second = lastfm.search_track("Creep", 5)

        assert first == second
        assert network.search_for_track.call_count == 1

    def test_similar_tracks(self, lastfm, network):
        network.get_track.return_value.get_similar.return_value = [
            pylast.SimilarItem(fake_track("Karma Police", "Radiohead"), 1.0),
            pylast.SimilarItem("not a track", 0.5),
        ]

        result = lastfm.get_similar_tracks("Radiohead", "Creep", 5)

        network.get_track.assert_called_once_with("Radiohead", "Creep")
        network.get_track.return_value.get_similar.assert_called_once_with(limit=5)
        assert result == [{"title": "Karma Police", "artist": "Radiohead", "match": 1.0}]

    def test_track_info(self, lastfm, network):
        track = network.get_track.return_value
        track.get_title.return_value = "Yesterday"
        track.artist = SimpleNamespace(name="The Beatles")
        track.get_album.return_value = SimpleNamespace(title="Help!")
        track.get_duration.return_value = 125000
        track.get_listener_count.return_value = 1000
        track.get_playcount.return_value = 5000
        track.get_top_tags.return_value = [pylast.TopItem(SimpleNamespace(get_name=lambda: "60s"), 100)]
        track.get_url.return_value = "https://www.last.fm/music/The+Beatles/_/Yesterday"

        info = lastfm.get_track_info("The Beatles", "Yesterday")

        assert info == {
            "title": "Yesterday",
            "artist": "The Beatles",
            "album": "Help!",
            "duration_seconds": 125,
            "listeners": 1000,
            "playcount": 5000,
            "tags": ["60s"],
            "url": "https://www.last.fm/music/The+Beatles/_/Yesterday",
        }

    def test_album_info(self, lastfm, network):
        album = network.get_album.return_value
        album.get_title.return_value = "Help!"
        album.artist = SimpleNamespace(name="The Beatles")
        album.get_listener_count.return_value = 10
        album.get_playcount.return_value = 20
        album.get_tracks.return_value = [fake_track("Help!", "The Beatles"), fake_track("Yesterday", "The Beatles")]
        album.get_url.return_value = "https://www.last.fm/music/The+Beatles/Help!"

        info = lastfm.get_album_info("The Beatles", "Help!")

        assert info["tracks"] == ["Help!", "Yesterday"]
        assert info["artist"] == "The Beatles"

    def test_search_album(self, lastfm, network):
        albums = [SimpleNamespace(title="Abbey Road", artist=SimpleNamespace(name="The Beatles"))]
        network.search_for_album.return_value.get_next_page.side_effect = [albums, []]

        assert lastfm.search_album("Abbey Road", 5) == [{"title": "Abbey Road", "artist": "The Beatles"}]

    def test_tag_top_tracks_and_artists(self, lastfm, network):
        tag = network.get_tag.return_value
        tag.get_top_tracks.return_value = [pylast.TopItem(fake_track("Teardrop", "Massive Attack"), 50)]
        tag.get_top_artists.return_value = [pylast.TopItem(SimpleNamespace(name="Bonobo"), 80)]

        assert lastfm.get_tag_top_tracks("chill", 5) == [
            {"title": "Teardrop", "artist": "Massive Attack", "weight": 50}
        ]
        assert lastfm.get_tag_top_artists("chill", 5) == [{"artist": "Bonobo", "weight": 80}]
        network.get_tag.assert_called_with("chill")

    def test_pylast_error_becomes_backend_error(self, lastfm, network):
        network.get_track.side_effect = pylast.WSError(network, "6", "Track not found")

        with pytest.raises(BackendOperationError, match="track.getInfo"):
            lastfm.get_track_info("Nobody", "Nothing")

    def test_unconfigured_network(self, cache):
        client = LastFM(api_key=None, cache=cache)

        with pytest.raises(BackendOperationError, match="not configured"):
            client.search_track("Yesterday", 5)

    def test_builds_network_from_api_key(self, cache, monkeypatch):
        network_cls = MagicMock()
        monkeypatch.setattr(pylast, "LastFMNetwork", network_cls)

        client = LastFM(api_key="key", api_secret="secret", cache=cache)

        network_cls.assert_called_once_with(api_key="key", api_secret="secret")
        assert client.network is network_cls.return_value
