from typing import List, Dict, Optional

class WhatsAppLists:
    """
    Factory para crear listas interactivas de WhatsApp.
    Responsabilidad única: generar estructuras de listas válidas para WhatsApp.
    """

    MAX_ROWS = 10                   # WhatsApp limita a 10 filas por mensaje
    MAX_HEADER_LENGTH = 60
    MAX_SECTION_TITLE_LENGTH = 24  # Máximo 24 caracteres para título de sección
    MAX_ROW_TITLE_LENGTH = 24      # Máximo 24 caracteres para título de fila
    MAX_ROW_DESCRIPTION_LENGTH = 72 # Máximo 72 caracteres para descripción de fila
    MAX_BUTTON_TEXT_LENGTH = 20    # Máximo 20 caracteres para texto del botón

    @staticmethod
    def create_list_response(
        text: str,
        options: List[Dict],
        button_text: str = "Show Options",
        section_title: str = "Options",
        header: Optional[str] = None
    ) -> Dict:
        """
        Crea una respuesta con lista para WhatsApp.

        Args:
            text: Texto del mensaje
            options: Lista de opciones con formato [{"id": "mumbai", "title": "Mumbai", "description": "..."}]
            button_text: Texto del botón principal
            section_title: Título de la sección
            header: Encabezado opcional del mensaje

        Returns:
            Dict: Estructura de mensaje con lista para WhatsApp

        Raises:
            ValueError: Si no hay opciones, hay demasiadas o faltan campos requeridos
        """
        if not options:
            raise ValueError("Debe proporcionar al menos una opción")

        if len(options) > WhatsAppLists.MAX_ROWS:
            raise ValueError(f"WhatsApp permite máximo {WhatsAppLists.MAX_ROWS} filas, recibidas: {len(options)}")

        validated_rows = []
        for opt in options:
            if not opt.get("id") or not opt.get("title"):
                raise ValueError("Cada opción debe tener 'id' y 'title'")

            row = {
                "id": opt["id"],
                "title": opt["title"][:WhatsAppLists.MAX_ROW_TITLE_LENGTH],
            }
            if opt.get("description"):
                row["description"] = opt["description"][:WhatsAppLists.MAX_ROW_DESCRIPTION_LENGTH]
            validated_rows.append(row)

        interactive = {
            "type": "list",
            "body": {"text": text},
            "action": {
                "button": button_text[:WhatsAppLists.MAX_BUTTON_TEXT_LENGTH],
                "sections": [{
                    "title": section_title[:WhatsAppLists.MAX_SECTION_TITLE_LENGTH],
                    "rows": validated_rows
                }]
            }
        }
        if header:
            interactive["header"] = {"type": "text", "text": header[:WhatsAppLists.MAX_HEADER_LENGTH]}

        return {
            "type": "interactive",
            "interactive": interactive
        }

    @staticmethod
    def create_simple_list(
        text: str,
        items: List[tuple],
        button_text: str = "Show Options",
        section_title: str = "Options",
        header: Optional[str] = None
    ) -> Dict:
        """
        Crea una lista de forma simplificada usando tuplas.

        Args:
            items: Lista de tuplas (id, title) o (id, title, description)

        Example:
            list_msg = create_simple_list(
                "Please select your city:",
                [("mumbai", "Mumbai"), ("online", "Online", "Live classes on Zoom")],
                section_title="City"
            )
        """
        options = []
        for item in items:
            if len(item) == 2:
                item_id, title = item
                description = ""
            elif len(item) == 3:
                item_id, title, description = item
            else:
                raise ValueError("Los items deben ser tuplas de 2 o 3 elementos: (id, title) o (id, title, description)")

            options.append({
                "id": item_id,
                "title": title,
                "description": description
            })

        return WhatsAppLists.create_list_response(text, options, button_text, section_title, header)
