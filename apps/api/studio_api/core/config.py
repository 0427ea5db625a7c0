from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    database_url: str
    jwt_secret_key: str = "your-secret-key-change-in-production"  # Default for development

    # Working hours, "today" and time off are all read in this zone
    business_timezone: str = "America/Edmonton"

    # Comma-separated list, e.g. "http://localhost:8081,https://studio-web.onrender.com"
    cors_origins: str = ""
    log_level: str = "INFO"

    # Rows in these statuses void availability for their day
    time_off_blocking_statuses: list[str] = ["pending", "approved", "rejected"]

    cron_secret: str | None = None

    expo_push_url: str = "https://exp.host/--/api/v2/push/send"
    twilio_account_sid: str | None = None
    twilio_auth_token: str | None = None
    twilio_from_number: str | None = None
    notification_timeout_seconds: float = 10.0

    class Config:
        env_file = ".env"

settings = Settings()
