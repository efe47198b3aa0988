# fleetadmin/config.py
import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
ENV_PATH = os.path.join(PROJECT_ROOT, ".env")
load_dotenv(dotenv_path=ENV_PATH)

class Settings(BaseSettings):
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")
    SUPABASE_SCHEMA: str = "public"
    REQUEST_TIMEOUT_SECONDS: float = 10

    FRONTEND_ORIGIN: str = "*"
    LOG_LEVEL: str = "INFO"

    DIESEL_PRICE_PER_LITER: float = 755
    DASHBOARD_RECENT_LIMIT: int = 5
    DASHBOARD_TOP_OWNERS_LIMIT: int = 5
    UNKNOWN_OWNER_LABEL: str = "Inconnu"

    class Config:
        env_file = ENV_PATH
        env_file_encoding = 'utf-8'
        extra = 'ignore' # Ignore extra fields from .env if any

settings = Settings()
