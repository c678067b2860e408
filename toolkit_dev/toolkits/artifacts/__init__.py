"""
Artifacts toolkit: let the model place long-form text, code or custom content
in the workspace panel next to the chat.
"""
from .base import artifacts_toolkit_base, ArtifactTools
from .server import artifacts_toolkit_server
from .client import artifacts_toolkit_client
