"""
Actions emitted by the orchestrator to its parent (the UI).


Copyright (c) 2023 Proton AG

This file is part of Proton VPN.

Proton VPN is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

Proton VPN is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with ProtonVPN.  If not, see <https://www.gnu.org/licenses/>.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from proton.vpn.federation.config.descriptors import ConnectionDescriptor
from proton.vpn.federation.serialization.entities import Profile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayError:
    """An error to be shown to the user."""
    title: str
    message: str


@dataclass(frozen=True)
class OpenProfileSelector:
    """The user has to choose one of the profiles."""
    profiles: Tuple[Profile, ...]


@dataclass(frozen=True)
class ConnectWithConfig:
    """The descriptor is ready to be handed to the platform VPN backend."""
    descriptor: ConnectionDescriptor


ParentAction = Union[DisplayError, OpenProfileSelector, ConnectWithConfig]


class SingleShotAction:
    """
    Holds at most one pending action, delivered to a single consumer.

    Posting a new action supersedes an unconsumed one. Once an action is
    taken it's cleared, so that it's never delivered twice (e.g. after the
    consumer is recreated).

    Note that this class is not thread-safe: it must only be used from the
    thread running the asyncio loop.
    """

    def __init__(self):
        self._pending: Optional[ParentAction] = None
        self._posted = asyncio.Event()

    @property
    def pending(self) -> Optional[ParentAction]:
        """The pending action, without consuming it."""
        return self._pending

    def post(self, action: ParentAction):
        """Posts a new action, replacing the pending one if there was one."""
        if self._pending is not None:
            logger.debug("Unconsumed action superseded: %s", self._pending)
        self._pending = action
        self._posted.set()

    def take(self) -> Optional[ParentAction]:
        """Consumes the pending action, if any."""
        action, self._pending = self._pending, None
        self._posted.clear()
        return action

    async def wait(self) -> ParentAction:
        """Waits until an action is posted and consumes it."""
        while self._pending is None:
            await self._posted.wait()
            # Another waiter might have taken the action already.
            if self._pending is None:
                self._posted.clear()
        return self.take()
