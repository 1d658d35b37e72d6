"""Application settings."""

from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 8788
    debug: bool = False
    frontend_dir: Path = Path(__file__).resolve().parent.parent / "frontend"
    # "Docs=/srv/docs;/mnt/media" - entries split on ";" or newlines
    roots: str = ""
    copy_chunk_size: int = 1024 * 1024

    model_config = {"env_prefix": "PANEO_"}


settings = Settings()
