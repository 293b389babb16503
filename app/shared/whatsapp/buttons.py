from typing import List, Dict

class WhatsAppButtons:
    """
    Factory para crear botones interactivos de WhatsApp.
    Responsabilidad única: generar estructuras de botones válidas para WhatsApp.
    """

    MAX_BUTTONS = 3  # WhatsApp limita a 3 botones por mensaje
    MAX_TITLE_LENGTH = 20  # Máximo 20 caracteres para título de botón
    MAX_BODY_LENGTH = 1024

    YES_ID = "continue_yes"
    NO_ID = "continue_no"

    @staticmethod
    def create_buttons_response(text: str, buttons: List[Dict]) -> Dict:
        """
        Crea una respuesta con botones para WhatsApp.

        Args:
            text: Texto del mensaje
            buttons: Lista de botones con formato [{"id": "new_client", "title": "New Client"}, ...]

        Returns:
            Dict: Estructura de mensaje con botones para WhatsApp

        Raises:
            ValueError: Si hay más de 3 botones, ninguno, o les falta id/título
        """
        if len(buttons) > WhatsAppButtons.MAX_BUTTONS:
            raise ValueError(f"WhatsApp permite máximo {WhatsAppButtons.MAX_BUTTONS} botones, recibidos: {len(buttons)}")

        if not buttons:
            raise ValueError("Debe proporcionar al menos un botón")

        validated_buttons = []
        for btn in buttons:
            if not btn.get("id") or not btn.get("title"):
                raise ValueError("Cada botón debe tener 'id' y 'title'")

            validated_buttons.append({
                "type": "reply",
                "reply": {
                    "id": btn["id"],
                    "title": btn["title"][:WhatsAppButtons.MAX_TITLE_LENGTH]
                }
            })

        return {
            "type": "interactive",
            "interactive": {
                "type": "button",
                "body": {"text": text[:WhatsAppButtons.MAX_BODY_LENGTH]},
                "action": {
                    "buttons": validated_buttons
                }
            }
        }

    @staticmethod
    def create_simple_buttons(text: str, button_data: List[tuple]) -> Dict:
        """
        Crea botones de forma simplificada usando tuplas (id, title).

        Example:
            buttons = create_simple_buttons(
                "Please tell us whether you are:",
                [("new_client", "🆕 New Client"), ("existing_client", "✅ Existing Client")]
            )
        """
        buttons = [
            {"id": btn_id, "title": title}
            for btn_id, title in button_data
        ]
        return WhatsAppButtons.create_buttons_response(text, buttons)

    @staticmethod
    def create_yes_no_buttons(text: str, yes_id: str = YES_ID, no_id: str = NO_ID) -> Dict:
        """
        Crea los botones estándar Yes/No.

        Los títulos son exactamente "Yes" y "No" porque la respuesta del
        usuario se compara por texto exacto.
        """
        buttons = [
            {"id": yes_id, "title": "Yes"},
            {"id": no_id, "title": "No"}
        ]
        return WhatsAppButtons.create_buttons_response(text, buttons)

    @staticmethod
    def can_use_buttons(items_count: int) -> bool:
        """True si los elementos caben en botones, False si se debe usar lista."""
        return items_count <= WhatsAppButtons.MAX_BUTTONS
