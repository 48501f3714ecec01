"""Channel name to queue URL resolution."""

from typing import Dict, List
from urllib.parse import urljoin


class ChannelUriResolver:
    """Maps channel names to queue URLs (cached).

    The URL is composed from the service base URL and the name, so no
    network call is made. Concurrent first lookups may both compute the URL;
    ``dict.setdefault`` keeps whichever is stored first, and both are equal.
    """

    def __init__(self, service_url: str):
        # urljoin replaces the last path segment unless the base ends with "/"
        self.service_url = service_url if service_url.endswith("/") else service_url + "/"
        self._cache: Dict[str, str] = {}

    def resolve(self, name: str) -> str:
        """Get queue URL for a channel name."""
        url = self._cache.get(name)
        if url is None:
            url = self._cache.setdefault(name, urljoin(self.service_url, name))
        return url

    def cached_names(self) -> List[str]:
        return list(self._cache)
