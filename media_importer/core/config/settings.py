# File: media_importer/core/config/settings.py

import os
import shutil
from pathlib import Path
from typing import Tuple


class Settings:
    # --- Paths ---
    # media_importer/core/config/settings.py -> config -> core -> media_importer -> ROOT
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = Path(os.getenv("MEDIA_DATA_DIR", str(BASE_DIR / "data")))
    STORAGE_DIR: Path = Path(os.getenv("MEDIA_STORAGE_DIR", str(DATA_DIR / "uploads")))

    # --- Public URLs ---
    MEDIA_BASE_URL: str = os.getenv("MEDIA_BASE_URL", "http://localhost:8000/uploads")

    # --- Import Behaviour ---
    # Store files under year/month buckets (e.g. uploads/2025/10/...)
    ORGANIZE_BY_DATE: bool = os.getenv("MEDIA_ORGANIZE_BY_DATE", "false").lower() == "true"
    ADMITTED_PREFIXES: Tuple[str, ...] = tuple(
        p.strip() for p in os.getenv("MEDIA_ADMITTED_PREFIXES", "image/,video/,audio/").split(",") if p.strip()
    )

    # --- Database ---
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "media_importer")

    @property
    def DATABASE_URL(self) -> str:
        if os.getenv("USE_SQLITE", "false").lower() == "true":
            return f"sqlite:///{self.DATA_DIR / 'media_importer.db'}"

        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # --- External Tools ---
    FFMPEG_BINARY: str = os.getenv("FFMPEG_BINARY_PATH", shutil.which("ffmpeg") or "ffmpeg")
    FFPROBE_BINARY: str = os.getenv("FFPROBE_BINARY_PATH", shutil.which("ffprobe") or "ffprobe")
    THUMBNAIL_WIDTH: int = int(os.getenv("THUMBNAIL_WIDTH", "150"))

    def ensure_dirs(self):
        """Creates necessary data directories if they don't exist."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.STORAGE_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
