"""Cookie header parsing."""


def parse_cookies(header: str | None) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Pairs are separated by ``"; "`` and split on their first ``=``, so
    values may themselves contain ``=`` (e.g. base64). Pairs without
    ``=`` are skipped. Returns an empty dict for empty or missing headers.
    """
    if not header:
        return {}
    cookies: dict[str, str] = {}
    for pair in header.split("; "):
        if "=" in pair:
            key, _, value = pair.partition("=")
            cookies[key] = value
    return cookies
