"""Relay backend collaborators."""

from relaysweep.backend.client import RelayBackendClient
from relaysweep.backend.scanner import TokenScanner

__all__ = ["RelayBackendClient", "TokenScanner"]
