"""Result-returning wrappers around operations that raise: JSON, URI and URL."""

from klaw_containers.adapters.json import SafeJSON
from klaw_containers.adapters.uri import SafeURI
from klaw_containers.adapters.url import SafeURL

__all__ = ['SafeJSON', 'SafeURI', 'SafeURL']
