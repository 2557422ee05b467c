from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    project_name: str = "Sign-up sheet"
    database_url: str = "sqlite:///./app.db"
    graph_output_dir: str = "public/assets/staggered_deadline_assignment_graph"
    due_date_format: str = "%Y-%m-%d %H:%M:%S"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

@lru_cache
def get_settings() -> Settings:
    return Settings()
