"""
Host resolution
Turns a signed or unsafe path into the value returned to callers
"""

from typing import Optional
from urllib.parse import quote, urlparse

from thumbor_url.core.errors import InvalidArgumentError

# Characters a URL path may carry as-is. "%" is kept so existing escapes
# are not encoded twice.
PATH_SAFE_CHARS = "/:@!$&'()*+,;=-._~%?#[]|"


def resolve_path(path: str, host: Optional[str] = None) -> str:
    """
    Resolve a Thumbor path against an optional host.

    The path is treated as relative to the host: it replaces whatever
    follows the last "/" of the host's path. Spaces and non-ASCII text are
    percent-encoded as UTF-8. Empty segments and "." or ".." segments are
    kept as they are: image URLs embedded in the path need their "//", and
    Thumbor verifies the signature against the exact path text.

    Args:
        path: Path without a leading slash
        host: Base URL of the Thumbor server

    Returns:
        Absolute URL when a host is given, "/" + path otherwise
    """
    if not host:
        return f"/{path}"

    parsed = urlparse(host)
    if not parsed.scheme or not parsed.netloc:
        raise InvalidArgumentError(
            f"Host must be an absolute URL, got {host!r}", field="host"
        )

    base_path = parsed.path
    base_dir = base_path[:base_path.rfind("/") + 1] if "/" in base_path else "/"

    # Hostnames are case-insensitive, credentials are not
    netloc = parsed.netloc if "@" in parsed.netloc else parsed.netloc.lower()

    return f"{parsed.scheme.lower()}://{netloc}{base_dir}{quote(path, safe=PATH_SAFE_CHARS)}"
