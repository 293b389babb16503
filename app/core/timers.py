import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional, Set

logger = logging.getLogger(__name__)

TimerAction = Callable[[], Awaitable[None]]


def _current_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        # Sin event loop activo (p. ej. limpieza síncrona)
        return None


class TimerRegistry:
    """
    Registro de timers con nombre de una sesión.
    Responsabilidad única: armar y cancelar acciones diferidas, como máximo una por nombre.

    Cada timer es una tarea de asyncio que duerme ``delay`` segundos y luego
    ejecuta su acción. Cancelar antes de que la acción empiece garantiza que
    nunca se ejecute, incluso si el sleep ya había vencido.
    """

    def __init__(self, owner: str = ""):
        self.owner = owner
        self._handles: Dict[str, asyncio.Task] = {}

    def arm(self, name: str, delay: float, action: TimerAction) -> asyncio.Task:
        """
        Arma un timer, reemplazando cualquier otro con el mismo nombre.

        Args:
            name: Nombre del timer (p. ej. "reminder_1")
            delay: Segundos hasta que la acción se dispare
            action: Corrutina sin argumentos a ejecutar

        Returns:
            asyncio.Task: Handle de la tarea armada
        """
        self.cancel(name)
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run(name, delay, action))
        self._handles[name] = task
        logger.debug(f"[TIMER] '{name}' armado para {self.owner} en {delay:.2f}s")
        return task

    def cancel(self, name: str) -> bool:
        """Cancela el timer indicado. Retorna True si había uno armado."""
        task = self._handles.pop(name, None)
        if task is None:
            return False
        # Una acción que se cancela a sí misma (expiración) no se interrumpe
        if task is not _current_task() and not task.done():
            task.cancel()
            logger.debug(f"[TIMER] '{name}' cancelado para {self.owner}")
        return True

    def cancel_all(self) -> None:
        """Cancela todos los timers del registro."""
        for name in list(self._handles):
            self.cancel(name)

    @property
    def pending(self) -> Set[str]:
        """Nombres de los timers que siguen armados."""
        return {name for name, task in self._handles.items() if not task.done()}

    def __contains__(self, name: str) -> bool:
        return name in self.pending

    def __len__(self) -> int:
        return len(self.pending)

    async def _run(self, name: str, delay: float, action: TimerAction) -> None:
        try:
            await asyncio.sleep(delay)
            logger.info(f"[TIMER] '{name}' disparado para {self.owner}")
            await action()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"[TIMER] Error ejecutando '{name}' para {self.owner}: {e}", exc_info=True)
        finally:
            if self._handles.get(name) is _current_task():
                del self._handles[name]
