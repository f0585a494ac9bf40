import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Request
from pydantic import BaseModel

ROOT_DIR = Path.cwd()

LOCAL_FRONTEND_ORIGIN = "http://localhost:3000"


class Settings(BaseModel):
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "mini_linkedin"
    port: int = 5000
    frontend_url: Optional[str] = None
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_hours: int = 24 * 7
    uploads_dir: Path = ROOT_DIR / "uploads"
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    log_level: str = "INFO"

    @property
    def allowed_origins(self) -> List[str]:
        # FRONTEND_URL is optional; drop it when unset
        return [origin for origin in (LOCAL_FRONTEND_ORIGIN, self.frontend_url) if origin]

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        load_dotenv(env_file or ROOT_DIR / '.env')
        defaults = cls()
        return cls(
            mongo_url=os.environ.get('MONGO_URL', defaults.mongo_url),
            db_name=os.environ.get('DB_NAME', defaults.db_name),
            port=int(os.environ.get('PORT', defaults.port)),
            frontend_url=os.environ.get('FRONTEND_URL') or None,
            jwt_secret=os.environ.get('JWT_SECRET', defaults.jwt_secret),
            jwt_expires_hours=int(os.environ.get('JWT_EXPIRES_HOURS', defaults.jwt_expires_hours)),
            uploads_dir=Path(os.environ.get('UPLOADS_DIR', defaults.uploads_dir)),
            admin_email=os.environ.get('ADMIN_EMAIL') or None,
            admin_password=os.environ.get('ADMIN_PASSWORD') or None,
            log_level=os.environ.get('LOG_LEVEL', defaults.log_level),
        )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
