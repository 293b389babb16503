import logging
from enum import Enum, auto
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

class Intent(Enum):
    """Enum para los tipos de intención del menú principal."""
    UNKNOWN = auto()
    SCHEDULE = auto()
    FEES = auto()
    JOIN = auto()
    CALLBACK = auto()
    REFERRAL = auto()
    CONCERN = auto()
    FEEDBACK = auto()


class IntentRule:
    """Una intención con sus palabras clave y los IDs de selección que la activan."""

    def __init__(self, intent: Intent, keywords: Tuple[str, ...], selection_ids: Tuple[str, ...] = ()):
        self.intent = intent
        self.keywords = keywords
        self.selection_ids = selection_ids

    def matches(self, text: str, selection_id: Optional[str] = None) -> bool:
        """Coincide por ID de selección exacto o por subcadena en el texto normalizado."""
        if selection_id and selection_id in self.selection_ids:
            return True
        return any(keyword in text for keyword in self.keywords)

    def __repr__(self) -> str:
        return f"IntentRule({self.intent.name})"


class KeywordIntentDetector:
    """
    Detector de intenciones por palabras clave.

    Las reglas se evalúan en orden de prioridad fijo y gana la primera que
    coincide: un texto con "fee" y "join" siempre resuelve a FEES.
    FEEDBACK va antes que FEES porque "feedback" contiene "fee".
    """

    DEFAULT_RULES: List[IntentRule] = [
        IntentRule(Intent.SCHEDULE, ("schedule", "timing", "batch"), ("class_schedule",)),
        IntentRule(Intent.FEEDBACK, ("feedback",), ("feedback",)),
        IntentRule(Intent.FEES, ("fee", "price", "cost", "charges"), ("fee_details",)),
        IntentRule(Intent.JOIN, ("join", "register", "enrol"), ("join_class",)),
        IntentRule(Intent.CALLBACK, ("callback", "call back", "call me"), ("request_callback",)),
        IntentRule(Intent.REFERRAL, ("refer",), ("refer_a_friend",)),
        IntentRule(Intent.CONCERN, ("concern", "complain"), ("raise_concern",)),
    ]

    def __init__(self, rules: Optional[List[IntentRule]] = None):
        self.rules = list(rules) if rules is not None else list(self.DEFAULT_RULES)

    def detect_intent(self, message: str, selection_id: Optional[str] = None) -> Intent:
        """
        Detecta la intención del mensaje.

        Args:
            message: Texto normalizado (minúsculas, sin '?')
            selection_id: ID de botón/lista si el mensaje fue interactivo

        Returns:
            Intent: La primera intención que coincide o UNKNOWN
        """
        for rule in self.rules:
            if rule.matches(message, selection_id):
                logger.debug(f"[INTENT] '{message}' -> {rule.intent.name}")
                return rule.intent

        logger.debug(f"[INTENT] Sin coincidencia para '{message}'")
        return Intent.UNKNOWN
