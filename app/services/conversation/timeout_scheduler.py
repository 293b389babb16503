import logging
from typing import List, NamedTuple, Optional

from app.core.config import get_settings
from app.models.session import Session
from app.services.conversation import catalog
from app.services.conversation.session_store import SessionStore
from app.shared.whatsapp import OutboundMessage

logger = logging.getLogger(__name__)
settings = get_settings()

REMINDER = "reminder"
EXPIRY = "expiry"


class LadderStep(NamedTuple):
    name: str
    delay: float  # segundos desde la última actividad
    kind: str


class TimeoutScheduler:
    """
    Responsabilidad única: mantener viva la conversación mientras el usuario responde.

    En cada evento entrante ``rearm`` cancela la escalera anterior y arma una
    nueva: recordatorio en T1, segundo recordatorio en T2 y expiración en T3.
    Los recordatorios no cambian el estado; la expiración despide al usuario
    y borra la sesión.
    """

    FIRST_REMINDER = "reminder_1"
    SECOND_REMINDER = "reminder_2"
    SESSION_EXPIRY = "session_expiry"

    def __init__(self, store: SessionStore, whatsapp_client, ladder: Optional[List[LadderStep]] = None):
        self.store = store
        self.whatsapp_client = whatsapp_client
        self.ladder = ladder if ladder is not None else self.build_ladder(
            settings.REMINDER_FIRST_MINUTES * 60,
            settings.REMINDER_SECOND_MINUTES * 60,
            settings.SESSION_EXPIRY_MINUTES * 60,
        )
        self._validate_ladder(self.ladder)

    @classmethod
    def build_ladder(cls, first_reminder: float, second_reminder: float, expiry: float) -> List[LadderStep]:
        """Escalera estándar a partir de tres retardos en segundos."""
        return [
            LadderStep(cls.FIRST_REMINDER, first_reminder, REMINDER),
            LadderStep(cls.SECOND_REMINDER, second_reminder, REMINDER),
            LadderStep(cls.SESSION_EXPIRY, expiry, EXPIRY),
        ]

    @staticmethod
    def _validate_ladder(ladder: List[LadderStep]) -> None:
        if not ladder or ladder[-1].kind != EXPIRY:
            raise ValueError("La escalera debe terminar con una expiración")
        delays = [step.delay for step in ladder]
        if any(d <= 0 for d in delays) or any(a >= b for a, b in zip(delays, delays[1:])):
            raise ValueError(f"Los retardos deben ser positivos y crecientes: {delays}")

    def rearm(self, session: Session) -> None:
        """Cancela la escalera previa y arma una nueva anclada a ahora."""
        session.timers.cancel_all()
        for step in self.ladder:
            if step.kind == EXPIRY:
                action = self._expiry_action(session)
            else:
                action = self._reminder_action(session, step.name)
            session.timers.arm(step.name, step.delay, action)
        logger.debug(f"[TIMER] Escalera rearmada para {session.conversation_id}")

    def cancel_all(self, session: Session) -> None:
        session.timers.cancel_all()

    def _reminder_action(self, session: Session, name: str):
        async def remind():
            text = catalog.REMINDER_TEXTS.get(name, catalog.REMINDER_TEXTS[self.FIRST_REMINDER])
            await self._dispatch(session.conversation_id, text)
            await self._dispatch(session.conversation_id, catalog.reminder_prompt())
        return remind

    def _expiry_action(self, session: Session):
        async def expire():
            await self._dispatch(session.conversation_id, catalog.SESSION_TIMEOUT)
            # Solo se borra si la sesión no fue reemplazada entretanto
            if self.store.get(session.conversation_id) is session:
                self.store.delete(session.conversation_id)
            else:
                session.timers.cancel_all()
            logger.info(f"[TIMER] Sesión expirada para {session.conversation_id}")
        return expire

    async def _dispatch(self, conversation_id: str, content: OutboundMessage) -> None:
        try:
            await self.whatsapp_client.send_message(conversation_id, content)
        except Exception as e:
            logger.error(f"[TIMER] Error enviando mensaje a {conversation_id}: {e}")
