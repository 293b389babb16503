import logging
from typing import Dict, Optional

from app.models.session import Session

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Almacén en memoria de sesiones por número de WhatsApp.
    Responsabilidad única: crear, consultar, reemplazar y borrar sesiones.

    Se crea una instancia por proceso y se inyecta en el engine y en el
    scheduler. Las sesiones no sobreviven a un reinicio.
    """

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def get(self, conversation_id: str) -> Optional[Session]:
        return self._sessions.get(conversation_id)

    def get_or_create(self, conversation_id: str) -> Session:
        """Retorna la sesión existente o una nueva en estado inicial."""
        session = self._sessions.get(conversation_id)
        if session is None:
            session = Session(conversation_id=conversation_id)
            self._sessions[conversation_id] = session
            logger.info(f"[SESSION] Nueva sesión para {conversation_id}")
        return session

    def put(self, conversation_id: str, session: Session) -> None:
        """Reemplaza la sesión guardada. Una sesión distinta anterior pierde sus timers."""
        previous = self._sessions.get(conversation_id)
        if previous is not None and previous is not session:
            previous.timers.cancel_all()
            logger.debug(f"[SESSION] Sesión anterior reemplazada para {conversation_id}")
        self._sessions[conversation_id] = session

    def delete(self, conversation_id: str) -> bool:
        """
        Elimina la sesión y cancela todos sus timers pendientes.

        Returns:
            bool: True si existía una sesión
        """
        session = self._sessions.pop(conversation_id, None)
        if session is None:
            return False
        session.timers.cancel_all()
        logger.info(f"[SESSION] Sesión eliminada para {conversation_id}")
        return True

    def clear(self) -> None:
        """Elimina todas las sesiones (apagado del proceso)."""
        for conversation_id in list(self._sessions):
            self.delete(conversation_id)

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
