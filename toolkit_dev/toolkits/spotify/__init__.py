"""
Spotify toolkit: read the user's playlists through the Spotify Web API.

Requires a linked Spotify account.
"""
from .base import spotify_toolkit_base, SpotifyTools
from .server import spotify_toolkit_server
from .client import spotify_toolkit_client
