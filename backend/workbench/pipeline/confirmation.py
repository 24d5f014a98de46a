"""Actions parked until the user explicitly confirms or denies them.

The gate only exposes ``register`` and ``take``. ``take`` pops the entry in a single
``dict.pop`` with no await in between, so two concurrent confirmations of the same
token cannot both get it.
"""
import logging
import secrets
import time
from collections import OrderedDict
from dataclasses import dataclass, field

from workbench.config import settings
from workbench.schemas.actions import Action

logger = logging.getLogger(__name__)


@dataclass
class PendingConfirmation:
    token: str
    action: Action
    requesting_user: str | None = None
    created_at: float = field(default_factory=time.monotonic)


class ConfirmationGate:
    def __init__(self, ttl_seconds: float | None = None, max_pending: int | None = None, clock=time.monotonic):
        self.ttl_seconds = settings.confirmation_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.max_pending = settings.confirmation_max_pending if max_pending is None else max_pending
        self._clock = clock
        self._pending: OrderedDict[str, PendingConfirmation] = OrderedDict()

    def __len__(self) -> int:
        return len(self._pending)

    def _expired(self, entry: PendingConfirmation) -> bool:
        return self.ttl_seconds > 0 and self._clock() - entry.created_at > self.ttl_seconds

    def _purge(self) -> None:
        # Insertion order is creation order, so expired entries sit at the front
        while self._pending:
            token, entry = next(iter(self._pending.items()))
            if not self._expired(entry):
                break
            del self._pending[token]
            logger.info("Pending action %s (%s) expired", token, entry.action.type)

    def register(self, action: Action, requesting_user: str | None = None) -> str:
        self._purge()
        while self.max_pending > 0 and len(self._pending) >= self.max_pending:
            token, entry = self._pending.popitem(last=False)
            logger.warning("Evicting pending action %s (%s): too many pending", token, entry.action.type)

        token = secrets.token_urlsafe(16)
        self._pending[token] = PendingConfirmation(
            token=token, action=action, requesting_user=requesting_user, created_at=self._clock()
        )
        logger.info("Action %s awaiting confirmation as %s", action.type, token)
        return token

    def take(self, token: str) -> PendingConfirmation | None:
        """Remove and return the pending entry, or None if unknown, resolved or expired."""
        entry = self._pending.pop(token, None)
        self._purge()
        if entry is None or self._expired(entry):
            return None
        return entry


confirmation_gate = ConfirmationGate()
