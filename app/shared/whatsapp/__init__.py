"""
Módulo para generar componentes interactivos de WhatsApp.
Automatiza la creación de botones y listas respetando los límites de la API.
"""

from .buttons import WhatsAppButtons
from .lists import WhatsAppLists
from .helper import WhatsAppHelper, OutboundMessage

__all__ = [
    'WhatsAppButtons',
    'WhatsAppLists',
    'WhatsAppHelper',
    'OutboundMessage',
]

# Funciones de conveniencia para importación rápida
create_interactive = WhatsAppHelper.create_simple_interactive
create_yes_no = WhatsAppHelper.create_yes_no
create_buttons = WhatsAppButtons.create_simple_buttons
create_list = WhatsAppLists.create_simple_list
