from enum import Enum

from pydantic_settings import BaseSettings


class Policy(str, Enum):
    STRICT = "strict"  # a bad record aborts the batch and closes the connection
    LENIENT = "lenient"  # bad records are skipped, nothing is signalled


class Settings(BaseSettings):
    url: str = "http://localhost:8086/api/v2/write?org=bobbycar&bucket=bobbycar&precision=ms"
    token: str = ""
    host: str = "0.0.0.0"
    port: int = 8080
    policy: Policy = Policy.STRICT
    write_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    class Config:
        env_prefix = "BOBBYCAR_"
        env_file = ".env"
        extra = "ignore"


settings = Settings()
