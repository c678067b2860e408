from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel

from toolkit_dev.tools.types import ServerToolConfig
from toolkit_dev.toolkits.create_toolkit import create_server_toolkit
from toolkit_dev.toolkits.credentials import require_account
from toolkit_dev.toolkits.http import VendorClient
from toolkit_dev.toolkits.types import ToolkitContext

from .base import GetPlaylistsInput, SpotifyTools, spotify_toolkit_base

SPOTIFY_API_BASE = "https://api.spotify.com/v1"


def _playlist_from_api(item: Dict[str, Any]) -> Dict[str, Any]:
    images = item.get("images") or []
    return {
        "id": item.get("id", ""),
        "name": item.get("name", ""),
        "url": (item.get("external_urls") or {}).get("spotify", ""),
        "image": images[0].get("url") if images else None,
    }


def get_playlists_server(api: VendorClient) -> ServerToolConfig:
    async def callback(args: GetPlaylistsInput) -> Dict[str, Any]:
        data = await api.get("/me/playlists", params={"limit": args.limit, "offset": args.offset})
        items = (data or {}).get("items") or []
        return {"playlists": [_playlist_from_api(p) for p in items]}

    return ServerToolConfig(
        callback=callback,
        message=lambda result: f"Found {len(result['playlists'])} playlists",
    )


async def _spotify_tools(_params: BaseModel, ctx: ToolkitContext) -> Dict[str, ServerToolConfig]:
    account = await require_account(ctx.accounts, "spotify", "Spotify")
    api = VendorClient(
        "Spotify",
        SPOTIFY_API_BASE,
        {"Authorization": f"Bearer {account.access_token}"},
        ctx,
    )
    return {SpotifyTools.GetPlaylists.value: get_playlists_server(api)}


spotify_toolkit_server = create_server_toolkit(
    spotify_toolkit_base,
    "You can use this toolkit to access the user's Spotify playlists.",
    _spotify_tools,
)
