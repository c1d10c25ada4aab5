"""
Dispatcher routing model function calls to the Music Backend.

Function names arriving from the model are parsed into a FunctionKind and a
typed argument bundle before anything is executed, so an unknown name or a
malformed payload never reaches the backend.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Mapping, Tuple, Type, Union

from .catalog import DEFAULT_LIMIT, get_descriptor
from .exceptions import MalformedFunctionArgumentsError, UnknownFunctionError
from .models import ParameterSpec

if TYPE_CHECKING:
    from .backend import MusicBackend

logger = logging.getLogger(__name__)


class FunctionKind(str, Enum):
    """Operations the model can request, valued by their catalog names."""

    SEARCH_TRACK = "searchTrack"
    GET_TRACK_INFO = "getTrackInfo"
    GET_RELATED_TRACKS = "getRelatedTracks"
    GET_ALBUM_INFO = "getAlbumInfo"
    SEARCH_ALBUM = "searchAlbum"
    GET_TAGS_TOP_TRACKS = "getTagsTopTracks"
    GET_TAGS_TOP_ARTISTS = "getTagsTopArtists"
    ADD_TO_PLAYLIST = "addToPlaylist"
    DELETE_FROM_PLAYLIST = "deleteFromPlaylist"
    PRINT_PLAYLIST = "printPlaylist"


@dataclass(frozen=True)
class SearchTrackArgs:
    song_title: str
    limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class TrackArgs:
    artist: str
    song_title: str


@dataclass(frozen=True)
class RelatedTracksArgs:
    artist: str
    song_title: str
    limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class AlbumArgs:
    artist: str
    album_title: str


@dataclass(frozen=True)
class SearchAlbumArgs:
    album_title: str
    limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class TagArgs:
    tag: str
    limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class PlaylistTrackArgs:
    song_title: str
    artist: str


@dataclass(frozen=True)
class NoArgs:
    pass


FunctionArgs = Union[
    SearchTrackArgs,
    TrackArgs,
    RelatedTracksArgs,
    AlbumArgs,
    SearchAlbumArgs,
    TagArgs,
    PlaylistTrackArgs,
    NoArgs,
]

# Argument bundle per kind, and how catalog parameter names map onto its fields
_BUNDLES: Dict[FunctionKind, Tuple[Type[Any], Dict[str, str]]] = {
    FunctionKind.SEARCH_TRACK: (SearchTrackArgs, {"songTitle": "song_title", "limit": "limit"}),
    FunctionKind.GET_TRACK_INFO: (TrackArgs, {"artist": "artist", "songTitle": "song_title"}),
    FunctionKind.GET_RELATED_TRACKS: (
        RelatedTracksArgs,
        {"artist": "artist", "songTitle": "song_title", "limit": "limit"},
    ),
    FunctionKind.GET_ALBUM_INFO: (AlbumArgs, {"artist": "artist", "albumTitle": "album_title"}),
    FunctionKind.SEARCH_ALBUM: (SearchAlbumArgs, {"albumTitle": "album_title", "limit": "limit"}),
    FunctionKind.GET_TAGS_TOP_TRACKS: (TagArgs, {"tag": "tag", "limit": "limit"}),
    FunctionKind.GET_TAGS_TOP_ARTISTS: (TagArgs, {"tag": "tag", "limit": "limit"}),
    FunctionKind.ADD_TO_PLAYLIST: (PlaylistTrackArgs, {"songTitle": "song_title", "artist": "artist"}),
    FunctionKind.DELETE_FROM_PLAYLIST: (
        PlaylistTrackArgs,
        {"songTitle": "song_title", "artist": "artist"},
    ),
    FunctionKind.PRINT_PLAYLIST: (NoArgs, {}),
}


@dataclass(frozen=True)
class FunctionCallRequest:
    """A validated function call: which operation, with which arguments."""

    kind: FunctionKind
    arguments: FunctionArgs


def _decode_arguments(name: str, arguments: Union[str, Mapping[str, Any], None]) -> Dict[str, Any]:
    if arguments is None or arguments == "":
        return {}
    if isinstance(arguments, Mapping):
        return dict(arguments)
    try:
        decoded = json.loads(arguments)
    except (TypeError, json.JSONDecodeError) as e:
        raise MalformedFunctionArgumentsError(
            f"Arguments for {name} are not valid JSON: {e}"
        ) from e
    if not isinstance(decoded, dict):
        raise MalformedFunctionArgumentsError(
            f"Arguments for {name} must be a JSON object, got {type(decoded).__name__}"
        )
    return decoded


def _coerce(name: str, param: str, spec: ParameterSpec, value: Any) -> Any:
    expected = spec.type
    if expected == "string":
        if isinstance(value, str):
            return value
    elif expected == "integer":
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, int) and not isinstance(value, bool):
            if spec.minimum is not None and value < spec.minimum:
                raise MalformedFunctionArgumentsError(
                    f"Argument '{param}' of {name} must be at least {spec.minimum}, got {value}"
                )
            return value
    raise MalformedFunctionArgumentsError(
        f"Argument '{param}' of {name} must be of type {expected}, got {value!r}"
    )


def parse_function_call(
    name: str, arguments: Union[str, Mapping[str, Any], None]
) -> FunctionCallRequest:
    """Parse a model function call into a FunctionCallRequest.

    Args:
        name: Function name requested by the model
        arguments: JSON-encoded argument object (or an already decoded mapping)

    Returns:
        FunctionCallRequest with the typed argument bundle

    Raises:
        UnknownFunctionError: If the name is outside the catalog
        MalformedFunctionArgumentsError: If arguments are not a JSON object,
            a required argument is missing, or an argument has the wrong type
    """
    try:
        kind = FunctionKind(name)
    except ValueError:
        raise UnknownFunctionError(f"Function {name} is not implemented.") from None

    descriptor = get_descriptor(name)
    raw = _decode_arguments(name, arguments)
    bundle_cls, field_names = _BUNDLES[kind]

    values: Dict[str, Any] = {}
    for param, spec in descriptor.parameters.items():
        value = raw.get(param)
        if value is None:
            if param in descriptor.required:
                raise MalformedFunctionArgumentsError(
                    f"Missing required argument '{param}' for {name}"
                )
            value = spec.default
            if value is None:
                continue
        values[field_names[param]] = _coerce(name, param, spec, value)

    return FunctionCallRequest(kind=kind, arguments=bundle_cls(**values))


class Dispatcher:
    """Executes function call requests against a Music Backend."""

    def __init__(self, backend: "MusicBackend"):
        """Initialize with the backend that serves the catalog operations.

        Args:
            backend: MusicBackend (or any object with the same coroutines)
        """
        self.backend = backend

    async def call(self, name: str, arguments: Union[str, Mapping[str, Any], None]) -> Any:
        """Parse and dispatch in one step."""
        return await self.dispatch(parse_function_call(name, arguments))

    async def dispatch(self, request: FunctionCallRequest) -> Any:
        """Invoke the backend operation matching the request.

        Args:
            request: Parsed function call request

        Returns:
            The backend's result, unchanged

        Raises:
            UnknownFunctionError: If the request kind has no handler
        """
        kind, args = request.kind, request.arguments
        logger.info(f"Dispatching {kind.value} with args: {args}")

        if kind is FunctionKind.SEARCH_TRACK:
            return await self.backend.search_track(args.song_title, args.limit)
        elif kind is FunctionKind.GET_TRACK_INFO:
            return await self.backend.get_track_info(args.artist, args.song_title)
        elif kind is FunctionKind.GET_RELATED_TRACKS:
            return await self.backend.get_related_tracks(args.artist, args.song_title, args.limit)
        elif kind is FunctionKind.GET_ALBUM_INFO:
            return await self.backend.get_album_info(args.artist, args.album_title)
        elif kind is FunctionKind.SEARCH_ALBUM:
            return await self.backend.search_album(args.album_title, args.limit)
        elif kind is FunctionKind.GET_TAGS_TOP_TRACKS:
            return await self.backend.get_tags_top_tracks(args.tag, args.limit)
        elif kind is FunctionKind.GET_TAGS_TOP_ARTISTS:
            return await self.backend.get_tags_top_artists(args.tag, args.limit)
        elif kind is FunctionKind.ADD_TO_PLAYLIST:
            return await self.backend.add_to_playlist(args.song_title, args.artist)
        elif kind is FunctionKind.DELETE_FROM_PLAYLIST:
            return await self.backend.delete_from_playlist(args.song_title, args.artist)
        elif kind is FunctionKind.PRINT_PLAYLIST:
            return await self.backend.print_playlist()
        else:
            raise UnknownFunctionError(f"Function {kind} is not implemented.")
