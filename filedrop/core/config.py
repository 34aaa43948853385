from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Filedrop API"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Records backend (None -> client unavailable)
    RECORDS_API_URL: str | None = None
    RECORDS_PROJECT_ID: str | None = None
    RECORDS_API_KEY: str | None = None
    RECORDS_TIMEOUT_SECONDS: float = 10.0
    SESSION_RECORD_TYPE: str = "uploadsession_c"

    # Upload validation
    MAX_UPLOAD_MB: int = 100
    MAX_FILENAME_CHARS: int = 255
    MAX_FILES_PER_REQUEST: int = 10
    BLOCKED_EXTENSIONS: tuple[str, ...] = (".exe", ".bat", ".cmd", ".scr", ".pif", ".com")

    # Simulated upload
    FILES_BASE_URL: str = "https://example.com/files"
    UPLOAD_TICK_SECONDS: float = 0.2
    UPLOAD_MAX_STEP: float = 15.0
    UPLOAD_FAILURE_PROBABILITY: float = 0.05
    UPLOAD_FAILURE_WINDOW_MIN_SECONDS: float = 1.0
    UPLOAD_FAILURE_WINDOW_MAX_SECONDS: float = 4.0

    # Notifications kept for the UI to poll
    NOTIFICATION_BUFFER_SIZE: int = 100


settings = Settings()
