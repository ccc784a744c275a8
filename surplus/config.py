import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./surplus.db"
    jwt_secret: str = ""
    cors_origins: Tuple[str, ...] = ("http://localhost:3000",)

    # Object storage (Cloudflare R2 via the S3 API)
    r2_bucket: str = ""
    cloudflare_account_id: str = ""
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""

    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()

    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")

    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./surplus.db"),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        r2_bucket=os.getenv("R2_BUCKET", ""),
        cloudflare_account_id=os.getenv("CLOUDFLARE_ACCOUNT_ID", ""),
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", ""),
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", ""),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
