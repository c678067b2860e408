from __future__ import annotations

from toolkit_dev.toolkits.create_toolkit import create_client_toolkit
from toolkit_dev.toolkits.types import ClientToolConfig

from .base import SpotifyTools, spotify_toolkit_base


def _playlists_result(result: dict) -> str:
    playlists = result.get("playlists") or []
    if not playlists:
        return "No playlists found."
    return "\n".join(f"- {p['name']} ({p['url']})" for p in playlists)


spotify_toolkit_client = create_client_toolkit(
    spotify_toolkit_base,
    {
        SpotifyTools.GetPlaylists.value: ClientToolConfig(
            call_view=lambda args: "Fetching your Spotify playlists...",
            result_view=_playlists_result,
        ),
    },
)
