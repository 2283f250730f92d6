import re
from typing import Iterable, Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from tinylink.utils.encoding import MIN_CODE_LENGTH, MAX_CODE_LENGTH

CODE_PATTERN = re.compile(rf"[A-Za-z0-9]{{{MIN_CODE_LENGTH},{MAX_CODE_LENGTH}}}")
MAX_URL_LENGTH = 2048
WEB_SCHEMES = ("http", "https")

_url_adapter = TypeAdapter(AnyUrl)


def is_valid_code(code) -> bool:
    """True iff `code` is 6 to 8 ASCII letters or digits."""
    if not isinstance(code, str):
        return False
    return CODE_PATTERN.fullmatch(code) is not None


def is_valid_url(url, schemes: Optional[Iterable[str]] = WEB_SCHEMES) -> bool:
    """
    Check that `url` is an absolute URL with a host and an allowed scheme.

    Args:
        url: candidate URL
        schemes: schemes the URL may use; None means the web schemes

    Returns:
        True if the URL is acceptable, False otherwise

    Note:
        Only the verdict is returned; callers keep the string they were given.
    """
    if not isinstance(url, str) or not url or len(url) > MAX_URL_LENGTH:
        return False

    # The URL parser silently drops tabs and newlines, so refuse them up front
    if any(ch.isspace() or ord(ch) < 32 or ord(ch) == 127 for ch in url):
        return False

    try:
        parsed = _url_adapter.validate_python(url)
    except ValidationError:
        return False

    if not parsed.host:
        return False

    allowed = {s.lower() for s in (schemes if schemes is not None else WEB_SCHEMES)}
    return parsed.scheme in allowed
