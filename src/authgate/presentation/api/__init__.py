"""HTTP transport for the account lifecycle."""

from authgate.presentation.api.app import create_app

__all__ = ["create_app"]
