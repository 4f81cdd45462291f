from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    catalog_url: str = ""
    catalog_api_key: str = ""
    catalog_timeout_seconds: float = 30.0
    methodology_path: Optional[str] = None

    class Config:
        env_file = ".env"
        env_prefix = "LCA_"
