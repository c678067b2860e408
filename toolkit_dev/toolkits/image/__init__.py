"""
Image toolkit: generate an image from a prompt with a configured image model.
"""
from .base import image_toolkit_base, ImageTools, ImageParameters
from .server import image_toolkit_server
from .client import image_toolkit_client
