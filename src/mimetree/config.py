"""Parser configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class ParserConfig(BaseSettings):
    """Limits applied while building a part tree."""

    model_config = {"env_prefix": "MIMETREE_", "frozen": True}

    max_depth: int = Field(
        default=32,
        ge=1,
        le=256,
        description="Maximum multipart nesting depth before the parse is aborted",
    )
