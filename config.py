import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Loan rules
    loan_days: int = int(os.getenv("LOAN_DAYS", "14"))
    recommendation_limit: int = int(os.getenv("RECOMMENDATION_LIMIT", "5"))

    # Report defaults
    default_report_limit: int = int(os.getenv("DEFAULT_REPORT_LIMIT", "5"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()

    # Application
    app_name: str = os.getenv("APP_NAME", "Library Catalogue")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")


settings = Settings()
