from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional

# Modelos del payload de webhooks de WhatsApp Cloud API.
# Solo se modelan los campos que usa el bot; el resto se ignora.

class TextBody(BaseModel):
    body: str = ""

class InteractiveButtonReply(BaseModel):
    id: str
    title: str

class InteractiveListReply(BaseModel):
    id: str
    title: str
    description: Optional[str] = None

class Interactive(BaseModel):
    type: str  # "button_reply" o "list_reply"
    button_reply: Optional[InteractiveButtonReply] = None
    list_reply: Optional[InteractiveListReply] = None

    @property
    def reply(self):
        """Respuesta seleccionada (botón o fila de lista), si existe."""
        if self.type == "button_reply":
            return self.button_reply
        if self.type == "list_reply":
            return self.list_reply
        return None

class Message(BaseModel):
    from_: str = Field(alias="from")      # "from" es palabra reservada
    id: str
    timestamp: str
    type: str
    text: Optional[TextBody] = None            # mensajes de texto
    interactive: Optional[Interactive] = None  # respuestas a botones/listas

class Contact(BaseModel):
    wa_id: Optional[str] = None
    profile: Optional[Dict[str, Any]] = None

    @property
    def profile_name(self) -> Optional[str]:
        """Nombre de perfil de WhatsApp, si el usuario lo comparte."""
        return (self.profile or {}).get("name")

class Status(BaseModel):
    id: str
    status: str  # sent | delivered | read | failed
    timestamp: str
    recipient_id: Optional[str] = None

class Metadata(BaseModel):
    display_phone_number: Optional[str] = None
    phone_number_id: Optional[str] = None

class Value(BaseModel):
    messaging_product: Optional[str] = None
    metadata: Optional[Metadata] = None
    messages: List[Message] = Field(default_factory=list)
    contacts: List[Contact] = Field(default_factory=list)
    statuses: List[Status] = Field(default_factory=list)

class Change(BaseModel):
    field: Optional[str] = None
    value: Value

class WhatsAppEntry(BaseModel):
    id: Optional[str] = None
    changes: List[Change] = Field(default_factory=list)

class WebhookPayload(BaseModel):
    object: Optional[str] = None
    entry: List[WhatsAppEntry] = Field(default_factory=list)

    @property
    def first_value(self) -> Optional[Value]:
        """Valor del primer cambio; WhatsApp envía un cambio por entrega."""
        if not self.entry or not self.entry[0].changes:
            return None
        return self.entry[0].changes[0].value
