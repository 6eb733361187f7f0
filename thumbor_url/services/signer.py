import base64
import hashlib
import hmac
from typing import Awaitable, Callable, Optional

from thumbor_url.core.errors import SigningEnvironmentError
from thumbor_url.core.logging import get_logger

logger = get_logger("signer")

UNSAFE_PREFIX = "unsafe"

# (message, key) -> raw digest
HmacSigner = Callable[[bytes, bytes], Awaitable[bytes]]


async def hmac_sha1(message: bytes, key: bytes) -> bytes:
    """Compute the HMAC-SHA1 digest Thumbor uses to verify URLs.

    Args:
        message: Bytes to authenticate
        key: Secret key bytes

    Returns:
        Raw 20 byte digest
    """
    return hmac.new(key, message, hashlib.sha1).digest()


def encode_signature(digest: bytes) -> str:
    """Encode a digest with the URL-safe base64 alphabet, padding kept."""
    return base64.urlsafe_b64encode(digest).decode("ascii")


async def sign_config(config: str, key: str, hmac_signer: HmacSigner = hmac_sha1) -> str:
    """Sign a config string.

    Args:
        config: The unsigned config string
        key: The Thumbor security key
        hmac_signer: Keyed-hash primitive

    Returns:
        URL-safe base64 signature

    Raises:
        SigningEnvironmentError: if the primitive fails or rejects the key
    """
    try:
        digest = await hmac_signer(config.encode("utf-8"), key.encode("utf-8"))
    except Exception as e:
        logger.error(f"Keyed-hash primitive failed: {type(e).__name__}")
        raise SigningEnvironmentError(original_exception=e) from e

    if not isinstance(digest, (bytes, bytearray, memoryview)):
        raise SigningEnvironmentError(
            "Keyed-hash primitive returned a non-bytes digest",
            context={"digest_type": type(digest).__name__}
        )

    return encode_signature(bytes(digest))


async def sign_path(config: str, key: Optional[str], is_metadata: bool = False,
                    hmac_signer: HmacSigner = hmac_sha1) -> str:
    """Prefix a config string with its signature, or mark it unsafe.

    Metadata configs already start with "meta/" and are never marked unsafe.
    """
    if not key:
        return config if is_metadata else f"{UNSAFE_PREFIX}/{config}"

    signature = await sign_config(config, key, hmac_signer)
    return f"{signature}/{config}"
