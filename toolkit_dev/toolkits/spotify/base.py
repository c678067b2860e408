from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from toolkit_dev.tools.types import create_base_tool
from toolkit_dev.toolkits.types import EmptyParameters, ToolkitConfig, Toolkits


class SpotifyTools(str, Enum):
    GetPlaylists = "get-playlists"


class GetPlaylistsInput(BaseModel):
    limit: int = Field(default=20, ge=1, le=50, description="Maximum number of playlists to return (1-50)")
    offset: int = Field(default=0, ge=0, description="Index of the first playlist to return")


class Playlist(BaseModel):
    id: str
    name: str
    url: str
    image: Optional[str] = None


class GetPlaylistsOutput(BaseModel):
    playlists: List[Playlist]


get_playlists_tool = create_base_tool(
    description="List the current user's Spotify playlists.",
    input_model=GetPlaylistsInput,
    output_model=GetPlaylistsOutput,
)


spotify_toolkit_base = ToolkitConfig(
    id=Toolkits.Spotify,
    name="Spotify",
    description="Browse your Spotify playlists.",
    tools={SpotifyTools.GetPlaylists.value: get_playlists_tool},
    parameters=EmptyParameters,
    required_provider="spotify",
)
