from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Calendar-day keys (yyyy-mm-dd) are taken in this zone
    TIMEZONE: str = "UTC"

    # Weekdays (Monday=0) paid at the user's reduced rate; 4 = Friday
    REDUCED_WEEKDAYS: list[int] = [4]

    MONEY_DECIMALS: int = 2
    HOURS_DECIMALS: int = 2


settings = Settings()
