from typing import Any, Mapping, Optional, Tuple, Union

from thumbor_url.core.config import settings
from thumbor_url.core.logging import get_logger
from thumbor_url.schemas.transform import TransformRequest, parse_request
from thumbor_url.services.assembler import assemble_config
from thumbor_url.services.signer import HmacSigner, hmac_sha1, sign_path
from thumbor_url.services.validator import validate_request
from thumbor_url.utils.host import resolve_path

logger = get_logger("thumbor")

RequestLike = Union[TransformRequest, Mapping[str, Any]]


def prepare_config(request: RequestLike) -> Tuple[TransformRequest, str]:
    """Validate a request and assemble its config string.

    Returns:
        The parsed request and its config string
    """
    request = parse_request(request)
    validate_request(request)
    return request, assemble_config(request)


async def build_transform_url(request: RequestLike, *, hmac_signer: HmacSigner = hmac_sha1) -> str:
    """Build a Thumbor URL for a transform request.

    Args:
        request: A TransformRequest or a mapping of its options
        hmac_signer: Keyed-hash primitive used when the request has a key

    Returns:
        "/unsafe/...", "/meta/..." or "/{signature}/..." path, resolved
        against the request host when one is set

    Raises:
        InvalidArgumentError: for malformed options, before any signing
        SigningEnvironmentError: if the signature cannot be computed
    """
    request, config = prepare_config(request)

    if settings.log_requests:
        logger.debug(f"Assembled thumbor config: {config} (signed: {bool(request.key)})")

    path = await sign_path(config, request.key, request.is_metadata, hmac_signer)
    return resolve_path(path, request.host)


class ThumborUrlService:
    """Service for generating Thumbor URLs with a default host and key."""

    def __init__(self, host: Optional[str] = None, key: Optional[str] = None,
                 hmac_signer: HmacSigner = hmac_sha1):
        self.host = host
        self.key = key
        self.hmac_signer = hmac_signer

    @classmethod
    def from_settings(cls) -> "ThumborUrlService":
        return cls(host=settings.thumbor_host, key=settings.thumbor_security_key)

    async def build_url(self, request: RequestLike) -> str:
        """Build a URL, filling in the service host and key where the
        request does not set its own.

        Args:
            request: A TransformRequest or a mapping of its options

        Returns:
            Thumbor URL or rooted path
        """
        request = parse_request(request)

        defaults = {}
        if request.host is None and self.host:
            defaults["host"] = self.host
        if request.key is None and self.key:
            defaults["key"] = self.key
        if defaults:
            request = request.model_copy(update=defaults)

        return await build_transform_url(request, hmac_signer=self.hmac_signer)


# Create a singleton instance
thumbor_url_service = ThumborUrlService.from_settings()
