import logging
import re
from typing import List, Optional, Tuple
from pydantic import ValidationError
from app.schemas.contact_schema import ContactDetails, EMAIL_PATTERN

logger = logging.getLogger(__name__)

# "Name: X", "*Email*: y", "email id - y"
LABEL_PATTERN = re.compile(
    r'^[\s*_]*(?P<label>name|e-?mail(?:\s*id)?)\b(?![@.])[\s*_]*[:\-]?\s*(?P<value>.*)$',
    re.IGNORECASE,
)
NAME_PREFIX_PATTERN = re.compile(r'^name[:\-]?\s*', re.IGNORECASE)


class ContactExtractor:
    """
    Responsabilidad única: extraer nombre y email del texto libre del usuario.

    Estrategias, en orden:
        1. Pares "etiqueta: valor" (Name / Email), sin importar mayúsculas ni orden.
        2. Respaldo posicional sobre las líneas no vacías: la primera línea con
           forma de email es el email y la primera línea sin '@' es el nombre.
    """

    @staticmethod
    def _lines(message: str) -> List[str]:
        return [line.strip() for line in message.splitlines() if line.strip()]

    @classmethod
    def extract(cls, message: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Extrae (nombre, email) sin validar.

        Args:
            message: Texto original enviado por el usuario

        Returns:
            Tuple[Optional[str], Optional[str]]: valores encontrados o None
        """
        name, email = None, None
        lines = cls._lines(message or "")

        for line in lines:
            match = LABEL_PATTERN.match(line)
            if not match:
                continue
            value = match.group("value").strip().strip('*').strip()
            if not value:
                continue
            if match.group("label").lower() == "name":
                name = name or value
            else:
                email = email or value

        if not name or not email:
            for line in lines:
                if not email and EMAIL_PATTERN.match(line):
                    email = line
                elif not name and "@" not in line:
                    name = NAME_PREFIX_PATTERN.sub('', line).strip()

        logger.debug(f"[CONTACT] Extraído nombre={name!r} email={email!r}")
        return name or None, email or None

    @classmethod
    def validate(cls, message: str) -> Tuple[bool, str, Optional[ContactDetails]]:
        """
        Extrae y valida nombre y email usando ContactDetails.

        Returns:
            Tuple[bool, str, Optional[ContactDetails]]: (is_valid, error_message, details)
        """
        name, email = cls.extract(message)
        if not name or not email:
            missing = "name" if not name else "email"
            logger.warning(f"[CONTACT] Falta {missing} en '{message}'")
            return (False, f"Please share your {missing}", None)

        try:
            details = ContactDetails(name=name, email=email)
            return (True, "", details)
        except ValidationError as e:
            error_msg = e.errors()[0]['msg']
            logger.warning(f"[CONTACT] Datos inválidos '{message}': {error_msg}")
            return (False, error_msg, None)
