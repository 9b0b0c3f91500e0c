from typing import Optional
from pydantic import BaseModel, Field
import os
from functools import lru_cache


class Settings(BaseModel):
    # MongoDB
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        description="Connection string of the MongoDB deployment holding the hosts",
    )
    mongodb_database: str = Field(
        default="host_registry",
        description="Database name inside the MongoDB deployment",
    )
    hosts_collection: str = Field(
        default="hosts",
        description="Collection the host documents are stored in",
    )
    mongodb_timeout_ms: Optional[int] = Field(
        default=5000,
        ge=0,
        description="Server selection timeout in milliseconds (None = driver default)",
    )

    # Sweep
    host_stale_after_ms: float = Field(
        default=432000,
        ge=0,
        description="Age in milliseconds after which a host is expired and swept on listing",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level, e.g. DEBUG or INFO",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        # Unset variables fall back to the field defaults
        raw = {
            "mongodb_uri": os.getenv("MONGODB_URI"),
            "mongodb_database": os.getenv("MONGODB_DATABASE"),
            "hosts_collection": os.getenv("HOSTS_COLLECTION"),
            "mongodb_timeout_ms": os.getenv("MONGODB_TIMEOUT_MS"),
            "host_stale_after_ms": os.getenv("HOST_STALE_AFTER_MS"),
            "log_level": os.getenv("LOG_LEVEL"),
        }
        return cls(**{key: value for key, value in raw.items() if value})


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
