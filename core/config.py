from pydantic_settings import BaseSettings
from pydantic import ConfigDict

class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="ignore")

    ENV: str = "development"

    DATABASE_URL: str = "sqlite:///./storefront.db"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    RATE_LIMIT_DEFAULT: str = "200/hour"

    # Orders / reports
    ORDERS_PAGE_SIZE: int = 10
    RECENT_ORDERS_LIMIT: int = 5
    REPORT_FILENAME: str = "orders_report.csv"
    REPORT_CSV_QUOTING: bool = False
    CURRENCY_SYMBOL: str = "₹"


settings = Settings()
