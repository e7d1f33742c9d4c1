from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    provider_timeout_seconds: float = 8.0
    provider_retry_delay_seconds: float = 1.0
    provider_max_retries: int = 1
    # Timed-out provider calls are abandoned unless this is set.
    provider_cancel_on_timeout: bool = False

    cache_ttl_seconds: float = 300.0

    http_timeout_seconds: float = 10.0
    http_user_agent: str = "TeeTimes Aggregator"

    default_course: str = "shadowmoss"
    timezone: str = "America/New_York"

    use_mock_providers: bool = False

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
