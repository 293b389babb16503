from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel

from app.core.timers import TimerRegistry


class ConversationState(str, Enum):
    """Estados del flujo de conversación (conjunto cerrado)."""
    GREETING = "greeting"
    COLLECTING_CONTACT_INFO = "collecting_contact_info"
    CONFIRMING_CLIENT_STATUS = "confirming_client_status"
    SELECTING_LOCATION = "selecting_location"
    SELECTING_CLASS_MODE = "selecting_class_mode"
    MAIN_MENU = "main_menu"
    COLLECTING_FREEFORM_INPUT = "collecting_freeform_input"
    AWAITING_CONTINUE = "awaiting_continue"
    AWAITING_CONTINUE_AFTER_INFO = "awaiting_continue_after_info"
    TERMINATED = "terminated"


class FreeformTopic(str, Enum):
    """Tipo de texto libre que se está recogiendo."""
    REFERRAL = "referral"
    CONCERN = "concern"
    FEEDBACK = "feedback"


class ClientStatus(str, Enum):
    NEW = "new"
    EXISTING = "existing"


# Nombres de campos recogidos durante la conversación
FIELD_NAME = "name"
FIELD_EMAIL = "email"
FIELD_PHONE = "phone"
FIELD_CITY = "city"
FIELD_STATUS = "status"
FIELD_CLASS_MODE = "class_mode"


@dataclass
class Session:
    """
    Estado mutable de una conversación.
    Responsabilidad única: guardar el paso actual y los datos recogidos de un usuario.
    """

    conversation_id: str
    state: ConversationState = ConversationState.GREETING
    collected_fields: Dict[str, str] = field(default_factory=dict)
    freeform_topic: Optional[FreeformTopic] = None
    timers: TimerRegistry = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.timers is None:
            self.timers = TimerRegistry(owner=self.conversation_id)

    def get_field(self, name: str, default: str = "") -> str:
        """Campo recogido o ``default`` si el usuario no lo ha dado."""
        return self.collected_fields.get(name) or default

    def set_field(self, name: str, value: str) -> None:
        self.collected_fields[name] = value

    @property
    def client_status(self) -> Optional[ClientStatus]:
        status = self.collected_fields.get(FIELD_STATUS)
        return ClientStatus(status) if status else None

    @property
    def pending_timers(self):
        return self.timers.pending


class InboundEvent(BaseModel):
    """Evento entrante normalizado, independiente del payload de WhatsApp."""
    conversation_id: str
    text: str = ""
    selection_id: Optional[str] = None
    message_id: Optional[str] = None

    @property
    def normalized_text(self) -> str:
        """Texto en minúsculas, sin '?' y sin espacios en los extremos."""
        return self.text.lower().replace("?", "").strip()

    @property
    def raw_text(self) -> str:
        return self.text.strip()

    @property
    def normalized_selection(self) -> str:
        return (self.selection_id or "").lower().strip()
