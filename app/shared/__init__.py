"""
Módulo de componentes compartidos para el bot de WhatsApp.
Contiene helpers reutilizables para diferentes partes de la aplicación.
"""

from .whatsapp import (
    WhatsAppButtons,
    WhatsAppLists,
    WhatsAppHelper,
    OutboundMessage,
    create_interactive,
    create_yes_no
)

__all__ = [
    'WhatsAppButtons',
    'WhatsAppLists',
    'WhatsAppHelper',
    'OutboundMessage',
    'create_interactive',
    'create_yes_no'
]
