import logging
from collections import OrderedDict
from typing import Optional

from app.models.session import InboundEvent, Session
from app.services.conversation.engine import ConversationEngine
from app.services.conversation.session_store import SessionStore
from app.services.conversation.timeout_scheduler import TimeoutScheduler
from app.services.notifications import TeamNotifier
from app.services.whatsapp import WhatsAppClient

logger = logging.getLogger(__name__)


class ConversationManager:
    """
    Responsabilidad única: Orquestar el procesamiento de un evento entrante.

    Flujo: sesión (get_or_create) -> rearmar timers -> paso del engine,
    que envía los mensajes y persiste o elimina la sesión.
    """

    MAX_TRACKED_MESSAGES = 1000

    def __init__(self, store: Optional[SessionStore] = None, whatsapp_client=None,
                 notifier: Optional[TeamNotifier] = None, scheduler: Optional[TimeoutScheduler] = None,
                 engine: Optional[ConversationEngine] = None):
        """
        Inicializa el gestor de conversaciones.
        Cada componente puede inyectarse (tests); si no, se crea el de producción.
        Se compara con None: un SessionStore vacío es falsy (define __len__).
        """
        self.store = store if store is not None else SessionStore()
        self.whatsapp_client = whatsapp_client if whatsapp_client is not None else WhatsAppClient()
        self.notifier = notifier if notifier is not None else TeamNotifier(self.whatsapp_client)
        self.scheduler = scheduler if scheduler is not None else TimeoutScheduler(self.store, self.whatsapp_client)
        self.engine = engine if engine is not None else ConversationEngine(self.store, self.whatsapp_client, self.notifier)

        # WhatsApp reintenta webhooks; se recuerdan los últimos IDs procesados
        self._processed_ids: "OrderedDict[str, None]" = OrderedDict()

    async def process_event(self, event: InboundEvent) -> Optional[Session]:
        """
        Procesa un evento entrante.

        Returns:
            Optional[Session]: Sesión resultante, o None si el mensaje era un duplicado
        """
        if self._is_duplicate(event.message_id):
            logger.info(f"Mensaje duplicado ignorado: {event.message_id}")
            return None

        logger.info(f"Procesando mensaje de {event.conversation_id}")

        session = self.store.get_or_create(event.conversation_id)
        self.scheduler.rearm(session)
        return await self.engine.step(session, event)

    def _is_duplicate(self, message_id: Optional[str]) -> bool:
        if not message_id:
            return False
        if message_id in self._processed_ids:
            return True
        self._processed_ids[message_id] = None
        if len(self._processed_ids) > self.MAX_TRACKED_MESSAGES:
            self._processed_ids.popitem(last=False)
        return False

    async def close(self):
        """Cancela todos los timers y descarta las sesiones en memoria."""
        try:
            self.store.clear()
            logger.debug("Recursos cerrados exitosamente")
        except Exception as e:
            logger.error(f"Error cerrando recursos: {e}")
