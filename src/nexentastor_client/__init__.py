"""High-level NexentaStor client entrypoints."""
from .auth import LoginAuth, TokenAuth
from .client import NexentaStorClient
from .config import ClientConfig
from .exceptions import ApplianceError, NexentaStorError

__all__ = [
    "NexentaStorClient",
    "ClientConfig",
    "NexentaStorError",
    "ApplianceError",
    "LoginAuth",
    "TokenAuth",
]
