from functools import lru_cache
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from app.core.config import get_settings
from app.models.message import Message, Status, WebhookPayload
from app.models.session import InboundEvent
from app.services.conversation import ConversationManager
import logging
from typing import Optional, Dict, Any, List

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook")
settings = get_settings()


@lru_cache
def get_conversation_manager() -> ConversationManager:
    """Instancia única del conversation manager (sesiones en memoria del proceso)."""
    return ConversationManager()

# ============================================================================
# ENDPOINTS PRINCIPALES
# ============================================================================

@router.get("")
async def verify_webhook(
    hub_mode: str = Query("", alias="hub.mode"),
    hub_challenge: str = Query("", alias="hub.challenge"),
    hub_verify_token: str = Query("", alias="hub.verify_token"),
):
    """Verifica el webhook de WhatsApp Business API."""
    if hub_mode == "subscribe" and hub_verify_token == settings.VERIFY_TOKEN:
        logger.info("Webhook verificado")
        return PlainTextResponse(content=hub_challenge, status_code=200)

    raise HTTPException(status_code=403, detail="Verification failed")


@router.post("")
async def receive_update(
    payload: WebhookPayload,
    conversation_manager: ConversationManager = Depends(get_conversation_manager),
):
    """
    Endpoint principal para recibir actualizaciones de WhatsApp.
    Responsabilidad: Orquestación y manejo de errores.
    """
    try:
        # 1. Extraer mensaje del payload
        message_data = _extract_message_from_payload(payload)
        if not message_data:
            return {"status": "ignored", "reason": "no_valid_message"}

        # 2. Manejar actualizaciones de estado si es el caso
        if message_data.get("type") == "status_update":
            return _handle_status_update(message_data["statuses"])

        # 3. Procesar mensaje de chat
        return await _process_chat_message(message_data, conversation_manager)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error procesando webhook: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error interno del servidor"
        )

# ============================================================================
# FUNCIONES PRIVADAS - EXTRACCIÓN Y VALIDACIÓN
# ============================================================================

def _extract_message_from_payload(payload: WebhookPayload) -> Optional[Dict[str, Any]]:
    """
    Extrae y valida el mensaje del payload de WhatsApp.
    Responsabilidad: Parsing y validación de estructura.
    """
    value = payload.first_value
    if value is None:
        logger.warning("Payload sin cambios, se ignora")
        return None

    # Verificar si es actualización de estado
    if value.statuses:
        return {
            "type": "status_update",
            "statuses": value.statuses
        }

    # Verificar si hay mensajes
    if not value.messages:
        return None

    message = value.messages[0]
    if value.contacts:
        logger.debug(f"Mensaje de perfil '{value.contacts[0].profile_name}' ({message.from_})")

    return {
        "type": "chat_message",
        "message": message,
        "from_number": message.from_,
        "message_id": message.id,
        "message_type": message.type
    }


def _build_inbound_event(message_data: Dict[str, Any]) -> Optional[InboundEvent]:
    """
    Convierte el mensaje de WhatsApp en un evento normalizado.
    Responsabilidad: Parsing de contenido específico por tipo.
    """
    message: Message = message_data["message"]
    message_type = message_data["message_type"]
    text, selection_id = None, None

    # Mensaje de texto
    if message_type == "text" and message.text:
        text = message.text.body

    # Mensaje interactivo (botones/listas)
    elif message_type == "interactive" and message.interactive:
        reply = message.interactive.reply
        if reply is None:
            logger.warning(f"Tipo interactivo no soportado: {message.interactive.type}")
            return None
        text, selection_id = reply.title, reply.id

    # Tipo no soportado (imágenes, audio, etc.)
    else:
        logger.warning(f"Tipo de mensaje no soportado: {message_type}")
        return None

    if not text or not text.strip():
        return None

    return InboundEvent(
        conversation_id=message_data["from_number"],
        text=text,
        selection_id=selection_id,
        message_id=message_data["message_id"],
    )

# ============================================================================
# FUNCIONES PRIVADAS - PROCESAMIENTO
# ============================================================================

async def _process_chat_message(message_data: Dict[str, Any], conversation_manager: ConversationManager) -> Dict[str, Any]:
    """
    Procesa un mensaje de chat completo.
    Responsabilidad: Orquestación del procesamiento de mensajes.
    """
    event = _build_inbound_event(message_data)
    if event is None:
        return {"status": "ignored", "reason": "unsupported_or_empty_message"}

    session = await conversation_manager.process_event(event)
    if session is None:
        return {"status": "ignored_duplicate", "message_id": event.message_id}

    return {
        "status": "processed",
        "message_id": event.message_id,
        "state": session.state.value
    }

# ============================================================================
# FUNCIONES PRIVADAS - MANEJO DE ESTADOS
# ============================================================================

def _handle_status_update(statuses: List[Status]) -> Dict[str, Any]:
    """
    Maneja actualizaciones de estado de mensajes desde WhatsApp.
    Responsabilidad: Registro de estados de delivery.
    """
    for status_update in statuses:
        logger.debug(f"Estado actualizado - ID: {status_update.id}, Estado: {status_update.status}")

    return {"status": "status_received", "count": len(statuses)}
