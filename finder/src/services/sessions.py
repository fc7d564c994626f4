import logging
import uuid
from collections import OrderedDict

from config import settings
from core.pagination import BrowseController
from services.tmdb import TMDBClient

logger = logging.getLogger(__name__)


class SessionRegistry:
    """In-memory browse sessions, one controller per browser tab."""

    def __init__(self, client: TMDBClient, max_sessions: int | None = None) -> None:
        self.client = client
        self.max_sessions = max_sessions or settings.MAX_SESSIONS
        self._sessions: OrderedDict[str, BrowseController] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> tuple[str, BrowseController]:
        session_id = uuid.uuid4().hex
        controller = BrowseController(self.client)
        self._sessions[session_id] = controller

        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Evicted session %s", evicted)

        logger.info("Created session %s (%d active)", session_id, len(self._sessions))
        return session_id, controller

    def get(self, session_id: str) -> BrowseController:
        controller = self._sessions[session_id]
        self._sessions.move_to_end(session_id)
        return controller

    def drop(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def reset(self) -> None:
        self._sessions.clear()
