import logging
import threading
from typing import Callable, List, Optional

import httpx

from barberdesk.client import ApiClient, ApiError, AuthenticationRequired
from barberdesk.config import NOTIFICATION_POLL_SECONDS
from barberdesk.core.errors import DomainError


logger = logging.getLogger(__name__)


class NotificationPoller:
    """Consulta as notificações recentes em intervalo fixo.

    Uma requisição por vez; falhas são registradas no log e a próxima tentativa
    acontece no intervalo seguinte. Sem sessão válida (401) o polling para.
    """

    def __init__(
        self,
        client: ApiClient,
        on_update: Callable[[List[dict]], None],
        interval: float = NOTIFICATION_POLL_SECONDS,
        limit: int = 20,
    ):
        self.client = client
        self.on_update = on_update
        self.interval = interval
        self.limit = limit

        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> Optional[List[dict]]:
        try:
            items = self.client.notifications.recent(self.limit)
        except AuthenticationRequired:
            logger.warning("Sessão inválida, polling de notificações interrompido")
            self._stop.set()
            return None
        except (httpx.HTTPError, ApiError, DomainError) as exc:
            logger.error("Erro ao buscar notificações: %s", exc)
            return None

        try:
            self.on_update(items)
        except Exception:
            logger.exception("Erro ao entregar notificações")
        return items

    def _run(self) -> None:
        while not self._stop.is_set():
            self.poll_once()
            self._stop.wait(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="notification-poller", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
