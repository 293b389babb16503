from typing import List, Dict, Optional, Union
from .buttons import WhatsAppButtons
from .lists import WhatsAppLists

OutboundMessage = Union[str, Dict]


class WhatsAppHelper:
    """
    Helper unificado que decide automáticamente entre botones o listas.
    Responsabilidad única: elegir el mejor formato según la cantidad de opciones.
    """

    @staticmethod
    def create_simple_interactive(
        text: str,
        items: List[tuple],
        button_text: str = "Show Options",
        section_title: str = "Options",
        header: Optional[str] = None,
        force_list: bool = False
    ) -> Dict:
        """
        Crea botones (hasta 3 opciones) o lista (4+ opciones o forzado).

        Args:
            text: Texto del mensaje
            items: Lista de tuplas (id, title) o (id, title, description)
            button_text: Texto del botón (solo para listas)
            section_title: Título de la sección (solo para listas)
            header: Encabezado (solo para listas)
            force_list: Forzar uso de lista aunque haya pocas opciones
        """
        if not items:
            raise ValueError("Debe proporcionar al menos una opción")

        if WhatsAppButtons.can_use_buttons(len(items)) and not force_list:
            return WhatsAppButtons.create_simple_buttons(text, [item[:2] for item in items])

        return WhatsAppLists.create_simple_list(text, items, button_text, section_title, header)

    @staticmethod
    def create_yes_no(text: str) -> Dict:
        """Crea botones Yes/No (siempre botones, nunca lista)."""
        return WhatsAppButtons.create_yes_no_buttons(text)

    @staticmethod
    def is_interactive(content: OutboundMessage) -> bool:
        return isinstance(content, dict) and content.get("type") == "interactive"

    @staticmethod
    def interactive_type(content: OutboundMessage) -> Optional[str]:
        """'button', 'list' o None si el contenido es texto plano."""
        if not WhatsAppHelper.is_interactive(content):
            return None
        return content.get("interactive", {}).get("type")

    @staticmethod
    def body_text(content: OutboundMessage) -> str:
        """Texto visible de un mensaje, sea texto plano o interactivo."""
        if WhatsAppHelper.is_interactive(content):
            return content["interactive"]["body"]["text"]
        return str(content)
