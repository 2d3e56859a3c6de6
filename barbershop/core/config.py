from datetime import date

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BUSINESS_NAME: str = "41 Hair Studio"
    BUSINESS_TIMEZONE: str = "Europe/Madrid"
    BUSINESS_LOCATION: str = "Parque de los Alcornocales, 1, Norte, 41015 Sevilla"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # "HH:MM-HH:MM" windows separated by commas; empty string means closed for online booking
    WEEKDAY_HOURS: str = "10:00-13:30,17:00-20:30"
    SATURDAY_HOURS: str = ""
    OPENING_HOURS_OVERRIDES: dict[str, str] = {}
    BOOKING_HORIZON_MONTHS: int = 2
    REQUIRE_PHONE: bool = True

    STORE_PROVIDER: str = "memory"  # "memory", "json", "notion"
    JSON_STORE_PATH: str = "./data/reservations.json"
    NOTION_TOKEN: str | None = None
    NOTION_DATABASE_ID: str | None = None
    NOTION_API_BASE: str = "https://api.notion.com/v1"
    NOTION_VERSION: str = "2022-06-28"

    HOLIDAY_PROVIDER: str = "nager"  # "nager", "static"
    HOLIDAY_COUNTRY_CODE: str = "ES"
    HOLIDAY_SUBDIVISION: str | None = "ES-AN"
    NAGER_BASE_URL: str = "https://date.nager.at/api/v3"
    HOLIDAY_RETRY_AFTER_SECONDS: float = 300.0
    EXTRA_BLACKOUT_DATES: list[date] = []

    EMAILJS_SERVICE_ID: str | None = None
    EMAILJS_TEMPLATE_ID_CLIENT: str | None = None
    EMAILJS_TEMPLATE_ID_OWNER: str | None = None
    EMAILJS_PUBLIC_KEY: str | None = None
    EMAILJS_PRIVATE_KEY: str | None = None
    EMAILJS_SEND_ENDPOINT: str = "https://api.emailjs.com/api/v1.0/email/send"
    OWNER_EMAIL: str | None = None

    CALENDAR_REMINDER: bool = True


settings = Settings()
