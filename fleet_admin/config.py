import os
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"

# Replace with a strong, securely stored key in production via FLEET_SECRET_KEY
DEFAULT_SECRET_KEY = "fleet-admin-dev-secret"
ALGORITHM = "HS256"


class Settings(BaseModel):
    data_dir: Path = DEFAULT_DATA_DIR
    secret_key: str = DEFAULT_SECRET_KEY
    access_token_expire_minutes: int = Field(60, gt=0)
    admin_username: str = "admin"
    admin_password: str = "admin123"
    auth_disabled: bool = False
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.environ.get("FLEET_CORS_ORIGINS", "*")
        return cls(
            data_dir=Path(os.environ.get("FLEET_DATA_DIR", str(DEFAULT_DATA_DIR))),
            secret_key=os.environ.get("FLEET_SECRET_KEY", DEFAULT_SECRET_KEY),
            access_token_expire_minutes=os.environ.get("FLEET_TOKEN_EXPIRE_MINUTES", "60"),
            admin_username=os.environ.get("FLEET_ADMIN_USERNAME", "admin"),
            admin_password=os.environ.get("FLEET_ADMIN_PASSWORD", "admin123"),
            auth_disabled=os.environ.get("FLEET_AUTH_DISABLED", "").lower() in ("1", "true", "yes"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.environ.get("FLEET_LOG_LEVEL", "INFO").upper(),
        )
