# api/utils/config.py
import os
from typing import List, Optional


class Settings:
    """Runtime configuration read from the environment"""

    def __init__(self):
        self.admin_password: Optional[str] = os.getenv("ADMIN_PASSWORD") or None
        self.admin_jwt_secret: Optional[str] = os.getenv("ADMIN_JWT_SECRET") or None
        self.cors_origins: List[str] = os.getenv("CORS_ORIGINS", "*").split(",")


def get_settings() -> Settings:
    """
    Dependency returning fresh settings for each request
    Usage: settings: Settings = Depends(get_settings)
    """
    return Settings()
