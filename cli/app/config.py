import httpx
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:93.0) Gecko/20100101 Firefox/93.0"
)


class Settings(BaseSettings):
    log_level: str = "INFO"

    media_dir: str = "./media"
    fetch_concurrency: int = 3
    fetch_timeout_seconds: float = 180.0
    user_agent: str = DEFAULT_USER_AGENT
    http_proxy: str | None = None
    reuse_cache: bool = False

    input_suffix: str = ".eml"
    output_suffix: str = ".embed.eml"

    @field_validator("http_proxy", mode="before")
    @classmethod
    def parse_proxy(cls, v):
        if v in (None, ""):
            return None
        try:
            url = httpx.URL(str(v).strip())
        except httpx.InvalidURL as exc:
            raise ValueError(f"invalid http_proxy {v!r}: {exc}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"invalid http_proxy {v!r}: expected http(s)://host[:port]")
        return str(url)

    @field_validator("fetch_concurrency")
    @classmethod
    def positive_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("fetch_concurrency must be at least 1")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
