from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    firecrawl_api_key: str = ""
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash-exp"
    google_application_credentials: str = ""
    supabase_url: str = ""
    supabase_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_ANON_KEY", "SUPABASE_KEY"
        ),
    )
    crawl_max_attempts: int = 120
    crawl_poll_interval: float = 1.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
