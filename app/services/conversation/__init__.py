"""
Módulo de gestión de conversaciones para WhatsApp Bot.

"""

# Importación principal usada por el webhook
from .conversation_manager import ConversationManager

# Componentes internos (para testing o uso avanzado)
from .session_store import SessionStore
from .timeout_scheduler import TimeoutScheduler, LadderStep
from .engine import ConversationEngine, Transition
from .contact_extractor import ContactExtractor

__all__ = [
    # Clase principal - usada por webhook
    "ConversationManager",

    # Componentes internos - para testing/debugging
    "SessionStore",
    "TimeoutScheduler",
    "LadderStep",
    "ConversationEngine",
    "Transition",
    "ContactExtractor",
]
