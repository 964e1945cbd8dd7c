"""Configuration management using Pydantic Settings"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Session storage
    storage_url: str = "sqlite:///./underwriter_console.db"

    # Backend services
    auth_api_base: str = "http://localhost:3000/api"
    credit_api_base: str = "http://172.16.0.18:7007/api"
    bvn_api_base: str = "http://172.16.0.18:7010/api"
    selfie_api_base: str = "http://172.16.0.18:7012/api"
    user_api_base: str = "http://172.16.0.18:7007/api"
    loanbot_api_base: str = "http://172.16.0.18:7017/api"

    # Service
    service_name: str = "underwriter-console"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 30.0

    # List views
    default_page_size: int = 20
    page_size_options: List[int] = [10, 20, 50, 100]


settings = Settings()
