from urllib.parse import urlsplit, urlunsplit


def redact_url(url: str) -> str:
    """Mask the password of any userinfo in a URL before it reaches the logs."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if parts.password is None:
        return url
    user, _, host = parts.netloc.rpartition("@")
    username = user.split(":", 1)[0]
    return urlunsplit(parts._replace(netloc=f"{username}:****@{host}"))
