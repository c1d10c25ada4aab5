"""
Function catalog for OpenAI function calling.

Declares the music operations the model may request. The same descriptors are
used by the dispatcher to check argument keys and types.
"""

from typing import Any, Dict, List, Tuple

from .exceptions import UnknownFunctionError
from .models import FunctionDescriptor, ParameterSpec

DEFAULT_LIMIT = 5


def _limit(noun: str = "tracks") -> ParameterSpec:
    return ParameterSpec(
        type="integer",
        description=f"The number of {noun} to return (default is {DEFAULT_LIMIT}).",
        default=DEFAULT_LIMIT,
        minimum=1,
    )


FUNCTION_CATALOG: Tuple[FunctionDescriptor, ...] = (
    FunctionDescriptor(
        name="searchTrack",
        description="Searches for tracks based on a song title.",
        parameters={
            "songTitle": ParameterSpec("string", "The title of the song to search for."),
            "limit": _limit(),
        },
        required=("songTitle",),
    ),
    FunctionDescriptor(
        name="getTrackInfo",
        description="Retrieves detailed information about a specific track.",
        parameters={
            "artist": ParameterSpec("string", "The name of the artist."),
            "songTitle": ParameterSpec("string", "The title of the song."),
        },
        required=("artist", "songTitle"),
    ),
    FunctionDescriptor(
        name="getRelatedTracks",
        description="Searches for similar tracks",
        parameters={
            "artist": ParameterSpec("string", "The name of the artist."),
            "songTitle": ParameterSpec("string", "The title of the song to search for."),
            "limit": _limit(),
        },
        required=("artist", "songTitle"),
    ),
    FunctionDescriptor(
        name="getAlbumInfo",
        description="Search for information about a particular album by an artist",
        parameters={
            "artist": ParameterSpec("string", "The artist of the album."),
            "albumTitle": ParameterSpec("string", "The title of the album."),
        },
        required=("artist", "albumTitle"),
    ),
    FunctionDescriptor(
        name="searchAlbum",
        description="Search for albums of the title provided",
        parameters={
            "albumTitle": ParameterSpec("string", "The title of the album."),
            "limit": _limit("albums"),
        },
        required=("albumTitle",),
    ),
    FunctionDescriptor(
        name="getTagsTopTracks",
        description="Search the top tracks related to a particular mood/genre/tag",
        parameters={
            "tag": ParameterSpec("string", "The tag related to a track."),
            "limit": _limit(),
        },
        required=("tag",),
    ),
    FunctionDescriptor(
        name="getTagsTopArtists",
        description="Search the top artists related to a particular mood/genre/tag",
        parameters={
            "tag": ParameterSpec("string", "The tag related to an artist."),
            "limit": _limit("artists"),
        },
        required=("tag",),
    ),
    FunctionDescriptor(
        name="addToPlaylist",
        description="Adds a particular track to the playlist",
        parameters={
            "songTitle": ParameterSpec("string", "The title of the song."),
            "artist": ParameterSpec("string", "The name of the artist."),
        },
        required=("songTitle", "artist"),
    ),
    FunctionDescriptor(
        name="deleteFromPlaylist",
        description="Deletes a particular track from the playlist",
        parameters={
            "songTitle": ParameterSpec("string", "The title of the song to remove."),
            "artist": ParameterSpec("string", "The name of the artist to remove."),
        },
        required=("songTitle", "artist"),
    ),
    FunctionDescriptor(
        name="printPlaylist",
        description="Prints ONLY the song title and the artist of a song",
    ),
)

_BY_NAME: Dict[str, FunctionDescriptor] = {d.name: d for d in FUNCTION_CATALOG}


def get_descriptor(name: str) -> FunctionDescriptor:
    """Look up a catalog entry by name.

    Args:
        name: Function name as requested by the model

    Returns:
        Matching FunctionDescriptor

    Raises:
        UnknownFunctionError: If the name is not in the catalog
    """
    try:
        return _BY_NAME[name]
    except KeyError:
        raise UnknownFunctionError(f"Function {name} is not implemented.") from None


def openai_function_definitions() -> List[Dict[str, Any]]:
    """Get the catalog as OpenAI function definitions, in catalog order."""
    return [descriptor.to_openai() for descriptor in FUNCTION_CATALOG]
