from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    BUSINESS_TIMEZONE: str = "Asia/Riyadh"

    JADWA_API_URL: str = "http://app.econolysis.sa:5000/api"
    JADWA_API_TOKEN: str | None = None
    JADWA_API_TIMEOUT_SECONDS: float = 10.0

    DRAFT_STORE: str = "memory"  # "memory" | "json"
    DRAFT_DATA_DIR: str = "./data/drafts"
    DRAFT_SCOPE_PER_ATTEMPT: bool = True
    DRAFT_WRITE_FAILURE_POLICY: str = "fail_open"  # "fail_open" | "fail_closed"
    DRAFT_TTL_SECONDS: int = 86400  # 0 keeps drafts forever

    PUBLIC_BASE_URL: str = "http://localhost:5173"
    MOYASAR_PUBLISHABLE_KEY: str | None = None

    SUCCESS_REDIRECT_PATH: str = "/client/bookings"
    SUCCESS_REDIRECT_DELAY_MS: int = 3500
    LOST_DRAFT_REDIRECT_DELAY_MS: int = 4500


settings = Settings()
