"""Application configuration loaded from .env and defaults."""
from pathlib import Path
from pydantic import field_validator
from pydantic_settings import BaseSettings

from src.mapping.serialize import is_js_identifier

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    db_path: Path = PROJECT_ROOT / "data" / "projects.db"
    log_path: Path = PROJECT_ROOT / "data" / "logs" / "app.log"
    log_level: str = "INFO"
    web_host: str = "127.0.0.1"
    web_port: int = 8787
    exclude_slug: str = ""
    map_var_name: str = "map_project_data"
    related_limit: int = 4
    classification_order: str = ""

    @field_validator("map_var_name")
    @classmethod
    def _check_map_var_name(cls, value: str) -> str:
        if not is_js_identifier(value):
            raise ValueError(f"MAP_VAR_NAME must be a JavaScript identifier, got {value!r}")
        return value

    def get_classification_order(self) -> list[str]:
        """Parse CLASSIFICATION_ORDER env var into an ordered list of slugs.

        Format: "water,education,health". Duplicates keep their first position.
        """
        if not self.classification_order:
            return []
        result: list[str] = []
        for slug in self.classification_order.split(","):
            slug = slug.strip()
            if slug and slug not in result:
                result.append(slug)
        return result

    class Config:
        env_file = str(PROJECT_ROOT / ".env")
        env_file_encoding = "utf-8"

def get_settings() -> Settings:
    return Settings()
