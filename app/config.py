from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    database_url: str = "postgresql+psycopg://app:app@db:5432/app"

    jwt_secret: str = "dev-secret-change-me"
    jwt_issuer: str = "workspace-tracker"
    jwt_audience: str = "workspace-tracker"
    jwt_expires_minutes: int = 60

    log_level: str = "INFO"

    # collapse *NotFound into 403 so non-members can't enumerate ids
    conceal_existence: bool = True

settings = Settings()
