"""Request filters deciding which responses get filled."""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Sequence, Union

from fieldfill.models.options import FillOptions

UrlPattern = Union[str, Pattern[str]]


@dataclass
class InterceptorConfig:
    """Which responses an interceptor fills, and how.

    String patterns match as substrings of the URL; compiled regexes are
    matched with ``search``. Empty ``url_patterns`` means every URL, empty
    ``methods`` means every method.
    """

    enabled: bool = True
    url_patterns: List[UrlPattern] = field(default_factory=list)
    exclude_patterns: List[UrlPattern] = field(default_factory=list)
    methods: List[str] = field(default_factory=list)
    fill_options: Optional[FillOptions] = None


def _matches_any(url: str, patterns: Sequence[UrlPattern]) -> bool:
    for pattern in patterns:
        if isinstance(pattern, str):
            if pattern in url:
                return True
        elif isinstance(pattern, re.Pattern) and pattern.search(url):
            return True
    return False


def should_intercept(config: InterceptorConfig, url: str, method: str = "GET") -> bool:
    """Decide whether a response for ``method url`` should be filled."""
    if not config.enabled:
        return False

    if config.url_patterns and not _matches_any(url, config.url_patterns):
        return False

    if config.exclude_patterns and _matches_any(url, config.exclude_patterns):
        return False

    if config.methods:
        allowed = {m.upper() for m in config.methods}
        if (method or "GET").upper() not in allowed:
            return False

    return True


def is_json_content_type(content_type: Optional[str]) -> bool:
    """Whether a Content-Type header announces a JSON body."""
    return "application/json" in (content_type or "").lower()
