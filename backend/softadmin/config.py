from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    registry_backend: str = "file"  # "file" | "redis"
    blob_backend: str = "local"  # "local" | "azure"
    db_file: str = "db.json"
    upload_dir: str = "uploads"
    redis_url: str = "redis://localhost:6379/0"
    redis_key: str = "db"
    azure_connection_string: str = ""
    azure_container: str = "software-admin-uploads"
    session_cookie: str = "sessionId"
    session_max_age: int = 24 * 60 * 60
    public_dir: str = "public"
    cors_origins: list[str] = ["*"]
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    class Config:
        env_prefix = "SOFTADMIN_"


settings = Settings()
