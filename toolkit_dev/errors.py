from __future__ import annotations

from typing import List, Optional


class ToolkitError(Exception):
    """Base error for toolkit registration and resolution."""
    pass


class UnknownToolkitError(ToolkitError):
    def __init__(self, toolkit_id: str) -> None:
        super().__init__(f"Unknown toolkit: {toolkit_id}")
        self.toolkit_id = toolkit_id


class ToolkitParameterError(ToolkitError):
    """
    Raised when selected toolkit parameters do not satisfy the toolkit's
    parameter schema. `details` carries the pydantic error list.
    """

    def __init__(self, toolkit_id: str, details: List[dict]) -> None:
        super().__init__(f"Invalid parameters for toolkit '{toolkit_id}'")
        self.toolkit_id = toolkit_id
        self.details = details


class ToolkitDefinitionError(ToolkitError):
    """A toolkit factory returned tools its descriptor never declared."""
    pass


class MissingCredentialError(ToolkitError):
    """
    The toolkit needs a linked third-party account (or API key) that is not
    available. The message is user-facing.
    """

    def __init__(self, provider: str, message: Optional[str] = None) -> None:
        super().__init__(
            message
            or f"No {provider} account found. Please connect your {provider} account first."
        )
        self.provider = provider


class ToolUpstreamError(Exception):
    """A vendor API call made by a tool callback failed."""
    pass
