from dotenv import find_dotenv, load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import STORAGE_NAMESPACE, TMDB_BASE_URL, TMDB_IMAGE_BASE_URL, TMDB_TIMEOUT_S


class Settings(BaseSettings):
    app_name: str = "Movie Swipe"
    # catalog
    tmdb_api_key: str | None = None
    tmdb_base_url: str = TMDB_BASE_URL
    tmdb_image_base_url: str = TMDB_IMAGE_BASE_URL
    tmdb_timeout_s: float = Field(default=TMDB_TIMEOUT_S, gt=0)
    # preference storage; in-process backend when redis_url is unset
    redis_url: str | None = None
    storage_namespace: str = STORAGE_NAMESPACE
    session_ttl_sec: int | None = Field(default=None, gt=0)
    log_level: str = "INFO"
    # env config
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def load_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True), override=False)
    return Settings()
