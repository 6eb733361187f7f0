import os
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Settings(BaseModel):
    """Library settings."""
    # Thumbor server used when a request does not name its own host
    thumbor_host: Optional[str] = Field(
        default_factory=lambda: os.getenv("THUMBOR_HOST") or None
    )
    # Security key shared with the Thumbor server (SECURITY_KEY in thumbor.conf)
    thumbor_security_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("THUMBOR_SECURITY_KEY") or None
    )

    # Debug logging of every assembled config string
    log_requests: bool = Field(
        default_factory=lambda: os.getenv("THUMBOR_LOG_REQUESTS", "False").lower() in ("true", "1", "t")
    )

    model_config = ConfigDict()


# Create global settings instance
settings = Settings()
