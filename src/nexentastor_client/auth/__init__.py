"""Authentication strategies for NexentaStor."""
from .base import AuthStrategy
from .login import LoginAuth
from .token import TokenAuth

__all__ = ["AuthStrategy", "LoginAuth", "TokenAuth"]
