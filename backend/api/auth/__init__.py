"""Authentication module for API access control."""

from .tokens import create_access_token, get_owner_id, verify_token

__all__ = ["create_access_token", "get_owner_id", "verify_token"]
