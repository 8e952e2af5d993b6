"""Signal regeneration service."""

from __future__ import annotations

import asyncio
import logging

from src.signals.generator import SignalGenerator
from src.signals.models import MatchSignals, MemberProfile
from src.signals.repository import SignalRepository
from src.utils.outcome import StoreFailure

logger = logging.getLogger(__name__)


class SignalService:
    """Regenerate and persist a member's match signals."""

    def __init__(
        self,
        repository: SignalRepository,
        generator: SignalGenerator | None = None,
    ) -> None:
        self.repository = repository
        self.generator = generator or SignalGenerator()

    async def regenerate(self, member: MemberProfile) -> MatchSignals:
        """Rebuild the member's signals and upsert them.

        Raises:
            StoreFailure: If the signals could not be persisted.
        """
        signals = self.generator.generate(member)
        try:
            stored = await self.repository.upsert(signals)
        except StoreFailure:
            logger.error("Failed to store match signals for %s", member.user_id)
            raise
        logger.info("Stored match signals for %s", member.user_id)
        return stored

    def schedule_regeneration(self, member: MemberProfile) -> asyncio.Task[MatchSignals]:
        """Regenerate in the background.

        The caller's flow continues immediately; awaiting the returned task
        yields the stored signals or raises the StoreFailure.
        """
        return asyncio.create_task(
            self.regenerate(member), name=f"regenerate-signals-{member.user_id}"
        )
