"""
Invite link helpers.

An invite link is an absolute URL whose first query parameter carries the
invite token, e.g. ``https://app.example.com/invite?token=abc123``.
"""

from urllib.parse import parse_qsl, urlencode, urlsplit

from ..errors import ValidationError


def build_invite_link(base_url: str, token: str) -> str:
    """
    Build the shareable link for an invite token.

    Args:
        base_url: Page that accepts invite tokens
        token: Raw invite token

    Returns:
        Absolute URL with the token as its first query parameter
    """
    return f"{base_url.rstrip('?&')}?{urlencode({'token': token})}"


def extract_invite_token(invite_link: str) -> str:
    """
    Extract the invite token from an invite link.

    The token is the value of the link's first query parameter, whatever
    its name.

    Args:
        invite_link: Absolute invite URL

    Returns:
        The invite token

    Raises:
        ValidationError: If the link is not an absolute URL or carries no token

    Example:
        ```python
        extract_invite_token("https://app.example.com/invite?token=abc")  # "abc"
        ```
    """
    try:
        parts = urlsplit((invite_link or "").strip())
    except ValueError as e:
        raise ValidationError("Invalid invite link.") from e

    if not parts.scheme or not parts.netloc:
        raise ValidationError("Invalid invite link.")

    params = parse_qsl(parts.query, keep_blank_values=True)
    if not params or not params[0][1]:
        raise ValidationError("Invalid invite link.")

    return params[0][1]
