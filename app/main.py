import app.logging_config
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.api.v1.webhook import router as webhook_router, get_conversation_manager
from app.core.timezone_helper import TimezoneHelper
from app.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)
studio_time = TimezoneHelper.get_studio_now()
logger.info(f"[TIMEZONE] Timezone del estudio: {settings.STUDIO_TIMEZONE}. Hora actual: {studio_time.strftime('%d/%m/%Y %H:%M:%S %Z')}")

APP_TITLE = "Shunyamudra Bot – WhatsApp"


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Las sesiones viven en memoria: al apagar se cancelan sus timers
    await get_conversation_manager().close()
    logger.info("[SHUTDOWN] Sesiones y timers liberados")


app = FastAPI(title=APP_TITLE, lifespan=lifespan)

app.include_router(webhook_router)

@app.get("/")
async def root():
    return {"message": APP_TITLE}
