"""
Tests for URL signing.

The reference scenarios are the library test scenarios published by Thumbor,
verified against libthumbor's base64 HMAC-SHA1 signer.
"""

import asyncio
import base64

import pytest

from thumbor_url.core.errors import SigningEnvironmentError, ThumborUrlError
from thumbor_url.services.signer import encode_signature, hmac_sha1, sign_config, sign_path
from thumbor_url.services.thumbor import build_transform_url
from thumbor_url.utils.filters import Color, brightness, contrast, round_corner, watermark

SECURITY_KEY = "my-security-key"
IMAGE_URL = "my.server.com/some/path/to/image.jpg"


class TestReferenceScenarios:
    """Signatures must match what the Thumbor server computes."""

    @pytest.mark.asyncio
    async def test_signing_of_a_known_url(self):
        url = await build_transform_url({
            "image": IMAGE_URL,
            "key": SECURITY_KEY,
            "resize": {"width": 300, "height": 200},
        })
        assert url == "/8ammJH8D-7tXy6kU3lTvoXlhu4o=/300x200/my.server.com/some/path/to/image.jpg"

    @pytest.mark.asyncio
    async def test_signing_with_meta(self):
        url = await build_transform_url({
            "image": IMAGE_URL,
            "key": SECURITY_KEY,
            "endpoint": "metadata",
        })
        assert url == "/Ps3ORJDqxlSQ8y00T29GdNAh2CY=/meta/my.server.com/some/path/to/image.jpg"

    @pytest.mark.asyncio
    async def test_signing_with_smart(self):
        url = await build_transform_url({
            "image": IMAGE_URL,
            "key": SECURITY_KEY,
            "smart": True,
        })
        assert url == "/-2NHpejRK2CyPAm61FigfQgJBxw=/smart/my.server.com/some/path/to/image.jpg"

    @pytest.mark.asyncio
    async def test_signing_with_fit_in(self):
        url = await build_transform_url({
            "image": IMAGE_URL,
            "key": SECURITY_KEY,
            "fitIn": True,
        })
        assert url == "/uvLnA6TJlF-Cc-L8z9pEtfasO3s=/fit-in/my.server.com/some/path/to/image.jpg"

    @pytest.mark.asyncio
    async def test_signing_with_filters(self):
        url = await build_transform_url({
            "image": IMAGE_URL,
            "key": SECURITY_KEY,
            "filters": [brightness(10), contrast(20)],
        })
        assert url == (
            "/ZZtPCw-BLYN1g42Kh8xTcRs0Qls=/filters:brightness(10):contrast(20)"
            "/my.server.com/some/path/to/image.jpg"
        )

    @pytest.mark.asyncio
    async def test_complex_safe_build(self):
        watermark_url = await build_transform_url({
            "image": "b.com/c.jpg",
            "resize": {"width": 20, "height": 20},
        })

        url = await build_transform_url({
            "image": "a.com/b.png",
            "key": "test",
            "crop": {"top": 10, "left": 10, "bottom": 90, "right": 90},
            "resize": {"width": 40, "height": 40},
            "filters": [watermark(watermark_url, 10, 10), round_corner(5, color=Color(255, 255, 255))],
        })

        assert url == (
            "/X_5ze5WdyTObULp4Toj6mHX-R1U=/10x10:90x90/40x40/filters:watermark(/unsafe/20x20/b.com/c.jpg,10,10,0)"
            ":round_corner(5,255,255,255)/a.com/b.png"
        )

    @pytest.mark.asyncio
    async def test_signed_url_with_host(self):
        url = await build_transform_url({
            "image": IMAGE_URL,
            "key": SECURITY_KEY,
            "host": "https://thumbor.example.com",
            "resize": {"width": 300, "height": 200},
        })
        assert url == (
            "https://thumbor.example.com/8ammJH8D-7tXy6kU3lTvoXlhu4o=/300x200/my.server.com/some/path/to/image.jpg"
        )


class TestSigner:
    """Signer behaviour with the primitive stubbed out."""

    @pytest.mark.asyncio
    async def test_hmac_sha1_digest_length(self):
        digest = await hmac_sha1(b"300x200/a.png", b"key")
        assert isinstance(digest, bytes)
        assert len(digest) == 20

    def test_encode_signature_uses_url_safe_alphabet(self):
        # 0xfb 0xff encodes to "+/8=" in the standard alphabet
        assert encode_signature(b"\xfb\xff") == "-_8="
        assert base64.b64encode(b"\xfb\xff").decode() == "+/8="

    @pytest.mark.asyncio
    async def test_sign_config_is_idempotent(self):
        first = await sign_config("300x200/a.png", SECURITY_KEY)
        second = await sign_config("300x200/a.png", SECURITY_KEY)
        assert first == second
        assert first.endswith("=")
        assert len(first) == 28

    @pytest.mark.asyncio
    async def test_sign_config_encodes_text_as_utf8(self, spy_signer):
        await sign_config("fill(blé)/ünïcode.png", "clé", spy_signer)
        spy_signer.assert_awaited_once_with("fill(blé)/ünïcode.png".encode("utf-8"), "clé".encode("utf-8"))

    @pytest.mark.asyncio
    async def test_sign_path_uses_injected_primitive(self, stub_signer):
        path = await sign_path("10x5/a.png", "key", hmac_signer=stub_signer)
        expected_signature = base64.urlsafe_b64encode(bytes(range(20))).decode()
        assert path == f"{expected_signature}/10x5/a.png"
        stub_signer.assert_awaited_once_with(b"10x5/a.png", b"key")

    @pytest.mark.asyncio
    async def test_unsigned_paths(self, stub_signer):
        assert await sign_path("10x5/a.png", None, hmac_signer=stub_signer) == "unsafe/10x5/a.png"
        assert await sign_path("meta/a.png", None, is_metadata=True, hmac_signer=stub_signer) == "meta/a.png"
        assert await sign_path("10x5/a.png", "", hmac_signer=stub_signer) == "unsafe/10x5/a.png"
        stub_signer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_signed_metadata_keeps_meta_after_signature(self, stub_signer):
        path = await sign_path("meta/a.png", "key", is_metadata=True, hmac_signer=stub_signer)
        assert path.endswith("/meta/a.png")
        assert "unsafe" not in path

    @pytest.mark.asyncio
    async def test_primitive_failure_is_fatal(self):
        async def broken_signer(message: bytes, key: bytes) -> bytes:
            raise RuntimeError("crypto backend unavailable")

        with pytest.raises(SigningEnvironmentError) as exc_info:
            await build_transform_url({"image": "a.png", "key": "k"}, hmac_signer=broken_signer)

        error = exc_info.value
        assert isinstance(error, ThumborUrlError)
        assert error.error_code == "signing_unavailable"
        assert "crypto backend unavailable" in error.message
        assert error.context["original_error_type"] == "RuntimeError"

    @pytest.mark.asyncio
    async def test_primitive_returning_garbage(self):
        async def text_signer(message: bytes, key: bytes):
            return "not-bytes"

        with pytest.raises(SigningEnvironmentError):
            await sign_config("a.png", "k", text_signer)

    @pytest.mark.asyncio
    async def test_concurrent_calls_are_independent(self):
        requests = [
            {"image": f"a.com/{i}.png", "key": SECURITY_KEY, "resize": {"width": i + 1, "height": i + 1}}
            for i in range(20)
        ]

        concurrent = await asyncio.gather(*(build_transform_url(r) for r in requests))
        sequential = [await build_transform_url(r) for r in requests]

        assert concurrent == sequential
        assert len(set(concurrent)) == len(requests)
