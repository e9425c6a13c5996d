from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Sources
    SOURCE_DIR: str = "."
    COLLECTIONS: List[str] = ["posts"]

    # Output
    OUTPUT_PATH: str = "assets/js/lunr/lunr-store.js"
    STORE_VARIABLE: str = "store"

    # Site
    SITE_URL: str = "http://localhost:4000"
    BASE_PATH: str = ""
    PERMALINK: str = "/:title/"
    TEASER: Optional[str] = None

    # Excerpts
    EXCERPT_WORDS: int = 50
    SEARCH_FULL_CONTENT: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def site_root(self) -> str:
        base_path = self.BASE_PATH.strip("/")
        root = self.SITE_URL.rstrip("/")
        return f"{root}/{base_path}" if base_path else root

    @property
    def output_file(self) -> Path:
        output = Path(self.OUTPUT_PATH)
        return output if output.is_absolute() else Path(self.SOURCE_DIR) / output


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
