"""
Phone-number assignment for newly provisioned assistants.

Only a mock allocator exists. It invents a random toll-free-looking
number and does NOT reserve anything with a carrier; real deployments
must plug in an allocator that calls the telephony provider. The
onboarding service stores whatever an allocator returns.
"""

import logging
import random
from typing import Optional, Protocol

from src.schemas.client_schema import ClientRecord

logger = logging.getLogger(__name__)


class PhoneNumberAllocator(Protocol):
    async def assign(self, client: ClientRecord, workflow_id: str) -> str:
        """Return the number callers will dial to reach this client's assistant."""


class MockPhoneNumberAllocator:
    """Random ``+1<area><exchange><line>`` numbers. Not production behavior."""

    def __init__(self, area_code: str = "855", rng: Optional[random.Random] = None) -> None:
        self._area_code = area_code
        self._rng = rng or random.Random()

    async def assign(self, client: ClientRecord, workflow_id: str) -> str:
        exchange = self._rng.randint(100, 999)
        line = self._rng.randint(1000, 9999)
        number = f"+1{self._area_code}{exchange}{line}"
        logger.warning("Mock phone number %s assigned to %s", number, client.client_id)
        return number
