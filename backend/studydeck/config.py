from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / ".studydeck" / "data"
    sqlite_filename: str = "studydeck.db"

    ollama_url: str = "http://localhost:11434"
    llm_model: str = "qwen2.5:3b"
    llm_timeout: float = 120.0
    llm_max_tokens: int = 2048
    material_max_chars: int = 6000  # material text sent to the generator

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 0  # 0 = pick a free port at startup

    model_config = {"env_prefix": "STUDYDECK_"}


settings = Settings()
