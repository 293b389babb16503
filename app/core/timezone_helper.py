import logging
from datetime import datetime
from typing import Optional
import pytz
from app.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Timezone del estudio (IST por defecto)
STUDIO_TZ = pytz.timezone(settings.STUDIO_TIMEZONE)

class TimezoneHelper:
    """
    Helper para manejar fechas en el timezone del estudio.
    Responsabilidad única: obtener la hora local y formatearla para WhatsApp.
    """

    @staticmethod
    def get_studio_now() -> datetime:
        """Obtiene la fecha y hora actual en el timezone del estudio."""
        return datetime.now(STUDIO_TZ)

    @staticmethod
    def to_studio_time(dt: datetime) -> datetime:
        """
        Convierte un datetime al timezone del estudio.
        Los datetimes naive se interpretan como UTC.
        """
        if dt.tzinfo is None:
            dt = pytz.utc.localize(dt)
        return dt.astimezone(STUDIO_TZ)

    @staticmethod
    def format_timestamp_for_whatsapp(dt: Optional[datetime] = None) -> str:
        """
        Formatea un instante para mostrarlo en un mensaje.

        Args:
            dt: Instante a formatear. Si es None se usa la hora actual.

        Returns:
            str: Fecha formateada "19/10/2026 14:05 IST"
        """
        dt = TimezoneHelper.to_studio_time(dt) if dt else TimezoneHelper.get_studio_now()
        return dt.strftime('%d/%m/%Y %H:%M %Z')
