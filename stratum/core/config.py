# stratum/core/config.py

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client Settings"""

    # Application
    APP_NAME: str = "Stratum RPC Client"
    VERSION: str = "0.1.0"

    # Endpoint
    STRATUM_URL: str = "http://127.0.0.1:8332"
    STRATUM_USER: Optional[str] = None
    STRATUM_PASSWORD: Optional[str] = None
    STRATUM_TIMEOUT: float = 30.0  # seconds, applied to connect/read/write
    USER_AGENT: str = "stratum-rpc/0.1.0"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "simple"  # json or simple

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore"
    }

settings = Settings()
