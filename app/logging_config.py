# app/logging_config.py
import logging
from pathlib import Path
from logging.handlers import TimedRotatingFileHandler
from app.core.config import get_settings

settings = get_settings()

# Directorio de logs relativo a la raíz del proyecto salvo que LOG_DIR sea absoluto
LOGS_DIR = Path(settings.LOG_DIR)
if not LOGS_DIR.is_absolute():
    LOGS_DIR = Path(__file__).resolve().parents[1] / LOGS_DIR
LOGS_DIR.mkdir(parents=True, exist_ok=True)

LOG_FILE = LOGS_DIR / "shunyamudra_bot.log"

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(),
        # Rotación a medianoche; se conservan LOG_RETENTION_DAYS archivos
        TimedRotatingFileHandler(LOG_FILE, when="midnight", interval=1,
                                 backupCount=settings.LOG_RETENTION_DAYS, encoding='utf-8'),
    ],
    force=True,    # sobreescribe config que ponga uvicorn
)

# httpx registra cada POST a la Cloud API en INFO
for noisy in ("httpx", "httpcore"):
    logging.getLogger(noisy).setLevel(logging.WARNING)
