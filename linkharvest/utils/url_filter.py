from urllib.parse import urlparse

FOLLOWED_SCHEMES = ('http', 'https')


def is_absolute_http_url(link) -> bool:
    """True if link is an absolute http(s) URL with a host

    Relative paths, fragments and other schemes (mailto:, javascript:, tel:)
    are rejected. No normalization is applied.
    """
    if not isinstance(link, str) or not link:
        return False
    try:
        parsed = urlparse(link)
    except ValueError:
        return False
    return parsed.scheme.lower() in FOLLOWED_SCHEMES and bool(parsed.netloc)
