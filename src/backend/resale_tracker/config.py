from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Resale Tracker"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173"]

    # OCR
    TESSERACT_CMD: str = ""  # Empty: rely on tesseract being on PATH
    TESSERACT_LANG: str = "eng"
    TESSERACT_CONFIG: str = "--oem 3 --psm 6"
    OCR_PREPROCESS: bool = True

    # Extraction tuning
    NAME_MIN_SCORE: int = 50
    MAX_PLAUSIBLE_PRICE: float = 5000
    EXTRA_BRANDS: List[str] = []
    EXTRA_PRODUCT_INDICATORS: List[str] = []
    EXTRA_UI_EXCLUSIONS: List[str] = []

    # Analytics
    DEFAULT_STATS_RANGE: str = "30d"
    RETURN_WINDOW_DAYS: int = 30  # Days after purchase an item can still be returned
    RETURN_ALERT_DAYS: int = 3

    # Uploads
    MAX_UPLOAD_MB: int = 10
    THUMBNAIL_SIZE: int = 200

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
