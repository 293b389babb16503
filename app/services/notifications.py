import logging
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from app.core.config import get_settings
from app.core.timezone_helper import TimezoneHelper

logger = logging.getLogger(__name__)
settings = get_settings()


class LeadKind(str, Enum):
    """Tipos de aviso que recibe el equipo."""
    REFERRAL = "customer referral"
    CONCERN = "customer concern/complaint"
    FEEDBACK = "customer feedback"
    REGISTRATION = "customer registration request"
    CALLBACK = "customer callback request"
    PERSONAL_SESSION = "personal session request"
    OTHER_LOCATION = "enquiry from another city"
    FEE_ENQUIRY = "customer fee enquiry"
    DEMO_BOOKING = "customer demo booking request"


class LeadNotification(BaseModel):
    """Campos fijos de un aviso al equipo."""
    kind: LeadKind
    name: str = ""
    phone: str = ""
    email: str = ""
    city: str = ""
    detail: Optional[str] = None
    received_at: datetime = Field(default_factory=TimezoneHelper.get_studio_now)

    def to_text(self) -> str:
        lines = [
            f"New {self.kind.value} received:",
            "",
            "*Details*:",
            f"Name: {self.name or '-'}",
            f"Phone Number: {self.phone or '-'}",
            f"Email Id: {self.email or '-'}",
            f"City: {self.city or '-'}",
        ]
        if self.detail:
            lines.append(f"Details: {self.detail}")
        lines.append(f"Received: {TimezoneHelper.format_timestamp_for_whatsapp(self.received_at)}")
        return "\n".join(lines)


class TeamNotifier:
    """
    Responsabilidad única: avisar al equipo del estudio por WhatsApp.
    El motor de conversación no espera confirmación de entrega.
    """

    def __init__(self, whatsapp_client, team_number: Optional[str] = None):
        self.whatsapp_client = whatsapp_client
        self.team_number = team_number if team_number is not None else settings.TEAM_WHATSAPP_NUMBER

    async def notify(self, lead: LeadNotification) -> bool:
        """
        Envía el aviso al número del equipo.

        Returns:
            bool: True si se envió, False si no hay número configurado
        """
        if not self.team_number:
            logger.warning(f"[NOTIFY] TEAM_WHATSAPP_NUMBER no configurado, aviso descartado: {lead.kind.value}")
            return False

        await self.whatsapp_client.send_message(self.team_number, lead.to_text())
        logger.info(f"[NOTIFY] Aviso '{lead.kind.value}' enviado al equipo")
        return True
