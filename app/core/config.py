from functools import lru_cache
from pathlib import Path
from dotenv import load_dotenv
import os

load_dotenv(Path(__file__).resolve().parents[2] / ".env")

class Settings:
    # WhatsApp Cloud API settings
    META_TOKEN: str = os.getenv("META_BOT_TOKEN")
    PHONE_ID: str = os.getenv("META_NUMBER_ID")
    VERIFY_TOKEN: str = os.getenv("META_VERIFY_TOKEN", "shunyamudra_token")
    GRAPH_API_VERSION: str = os.getenv("META_VERSION", "v18.0")
    BASE_URL: str = f"https://graph.facebook.com/{GRAPH_API_VERSION}"

    # Número del equipo que recibe los avisos de leads, quejas y feedback
    TEAM_WHATSAPP_NUMBER: str = os.getenv("TEAM_WHATSAPP_NUMBER", "")

    # Escalera de inactividad (minutos)
    REMINDER_FIRST_MINUTES: float = float(os.getenv("REMINDER_FIRST_MINUTES", "30"))
    REMINDER_SECOND_MINUTES: float = float(os.getenv("REMINDER_SECOND_MINUTES", "60"))
    SESSION_EXPIRY_MINUTES: float = float(os.getenv("SESSION_EXPIRY_MINUTES", "65"))

    STUDIO_TIMEZONE: str = os.getenv("STUDIO_TIMEZONE", "Asia/Kolkata")
    # Logging: nivel, directorio (relativo a la raíz del proyecto) y días de retención
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")
    LOG_RETENTION_DAYS: int = int(os.getenv("LOG_RETENTION_DAYS", "30"))

@lru_cache
def get_settings() -> Settings:
    return Settings()
