import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Application
    app_name: str = os.getenv("APP_NAME", "School Library")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = _flag("DEBUG", "False")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "DEBUG" if _flag("DEBUG", "False") else "WARNING")
    log_file: Optional[str] = os.getenv("LOG_FILE")

    # Console output
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain")
    date_format: str = os.getenv("DATE_FORMAT", "%d/%m/%Y")
    currency_symbol: str = os.getenv("CURRENCY_SYMBOL", "$")

    # Session bootstrap
    load_seed_data: bool = _flag("LOAD_SEED_DATA", "True")


settings = Settings()
