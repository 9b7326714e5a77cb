from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_prefix="APP_",
    )

    SECRET_KEY: str
    WORKERS: int = 1
    PORT: int = 8000
    DEBUG: bool = False
    CORS_ORIGINS: list[str] | str = []
    APP_VERSION: str = "1.0"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str
    DATABASE_URL_SYNC: str = ""
    SQL_LOG_FILE: str = "logs/sql.log"

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    SESSION_COOKIE_NAME: str = "access_token"

    # Password policy handed to the identity layer
    PASSWORD_MIN_LENGTH: int = 6
    PASSWORD_REQUIRE_DIGIT: bool = True
    PASSWORD_REQUIRE_LOWERCASE: bool = True
    PASSWORD_REQUIRE_UPPERCASE: bool = True
    PASSWORD_REQUIRE_NON_ALPHANUMERIC: bool = False

    STORAGE_BACKEND: str = "local"
    MEDIA_ROOT: str = "media"
    MEDIA_URL: str = "/media/"
    S3_BUCKET: str = ""
    S3_ACCESS_KEY: str = ""
    S3_SECRET_KEY: str = ""
    S3_BASE_PATH: str = ""

    ERROR_WEBHOOK_URL: str = ""

    SEED_SUPERUSER_EMAIL: str = ""
    SEED_SUPERUSER_PASSWORD: str = ""

    @property
    def cors_origins(self) -> list[str]:
        if isinstance(self.CORS_ORIGINS, str):
            return [
                origin.strip()
                for origin in self.CORS_ORIGINS.split(",")
                if origin.strip()
            ]
        return self.CORS_ORIGINS


settings = AppConfig()
