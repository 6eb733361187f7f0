import os
import sys
from unittest.mock import AsyncMock

import pytest

# Add the project root directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from thumbor_url.services.signer import hmac_sha1


@pytest.fixture
def stub_signer():
    """A keyed-hash primitive returning a fixed 20 byte digest."""
    return AsyncMock(return_value=bytes(range(20)))


@pytest.fixture
def spy_signer():
    """The real HMAC-SHA1 primitive wrapped so calls can be inspected."""
    return AsyncMock(side_effect=hmac_sha1)
