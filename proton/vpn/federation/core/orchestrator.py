"""
Orchestrates the whole flow, from registering a server to handing its VPN
configuration to the platform VPN backend.


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
from typing import Any, Optional

from proton.vpn.federation import constants
from proton.vpn.federation.config.descriptors import ConnectionDescriptor
from proton.vpn.federation.config.parser import VPNConfigParser
from proton.vpn.federation.core.actions import (
    ConnectWithConfig, DisplayError, OpenProfileSelector, ParentAction, SingleShotAction
)
from proton.vpn.federation.enum import ConnectionState
from proton.vpn.federation.exceptions import (
    ConfigFetchFailure, DiscoveryFailure, ProfileSelectionRequired
)
from proton.vpn.federation.interfaces import (
    DiscoveryClient, HistoryService, OpenVPNImporter, PlatformVPN, PreferencesService
)
from proton.vpn.federation.serialization.entities import Instance, Profile

logger = logging.getLogger(__name__)


class ConnectionOrchestrator:  # pylint: disable=too-many-instance-attributes
    """
    Takes care of the entire connection flow: discovering the server API,
    fetching the VPN configuration of the selected profile and emitting the
    parsed configuration so that the UI can connect with it.

    At most one step (discovery or configuration fetch) runs at a time. The
    outcome of each step is emitted through :attr:`parent_action`, and every
    step leaves the state back to ``ConnectionState.READY`` once it's done.
    """

    def __init__(
            self, *,
            discovery_client: DiscoveryClient,
            history_service: HistoryService,
            preferences_service: PreferencesService,
            platform_vpn: PlatformVPN,
            openvpn_importer: OpenVPNImporter = None,
            config_parser: VPNConfigParser = None,
    ):
        if not config_parser and not openvpn_importer:
            raise ValueError("Either an OpenVPN importer or a config parser is required.")

        self._discovery_client = discovery_client
        self._history_service = history_service
        self._preferences_service = preferences_service
        self._platform_vpn = platform_vpn
        self._config_parser = config_parser or VPNConfigParser(openvpn_importer)
        self._state = ConnectionState.READY
        self._parent_action = SingleShotAction()
        self._pending_task: Optional[asyncio.Task] = None
        # Incremented whenever results of the running step become irrelevant.
        self._attempt = 0

    @property
    def state(self) -> ConnectionState:
        """The current connection state."""
        return self._state

    @property
    def parent_action(self) -> SingleShotAction:
        """Channel through which the outcome of each step is emitted."""
        return self._parent_action

    @property
    def pending_task(self) -> Optional[asyncio.Task]:
        """The task running the current step, if there is one."""
        return self._pending_task

    @property
    def is_busy(self) -> bool:
        """Whether a step is currently running."""
        return bool(self._pending_task and not self._pending_task.done())

    def discover_api(self, server: Instance) -> Optional[asyncio.Task]:
        """
        Registers the server and, once done, fetches its VPN configuration.

        :returns: the task running the step, or None if another step is
            already running.
        """
        if not self._can_start_step("discover_api", server):
            return None

        self._set_state(ConnectionState.DISCOVERING_API)
        return self._start_step(self._discover_api(server, self._attempt))

    def fetch_profiles_and_connect(self, server: Instance) -> Optional[asyncio.Task]:
        """
        Fetches the VPN configuration of the last selected profile and emits it.

        :returns: the task running the step, or None if another step is
            already running.
        """
        if not self._can_start_step("fetch_profiles_and_connect", server):
            return None

        return self._start_step(self._fetch_profiles_and_connect(server, self._attempt))

    def select_profile_to_connect_to(self, profile: Profile) -> bool:
        """Selects the profile to be used when fetching the VPN configuration."""
        self._discovery_client.select_profile(profile)
        return True

    def on_authorization_started(self):
        """
        To be called when the external authorization flow (e.g. the browser)
        is opened while discovering the server API.
        """
        if self._state is ConnectionState.DISCOVERING_API:
            self._set_state(ConnectionState.AUTHORIZING)

    def on_resume(self):
        """
        To be called when the UI is resumed. Coming back while authorizing
        means the authorization flow was abandoned, so it's cancelled.
        """
        if self._state is not ConnectionState.AUTHORIZING:
            return

        logger.info("Authorization was abandoned.")
        # The running step is not aborted but its result will be disregarded.
        self._attempt += 1
        self._pending_task = None
        self._set_state(ConnectionState.READY)

    async def connection_to_config(self, descriptor: ConnectionDescriptor) -> Any:
        """Hands the descriptor to the platform VPN backend."""
        self._set_state(ConnectionState.READY)
        return await self._platform_vpn.connection_to_config(descriptor)

    async def disconnect_with_call(self, handle: Any):
        """Tears down the VPN connection."""
        await self._platform_vpn.disconnect(handle)

    def delete_all_data_for_instance(self, server: Instance):
        """Removes all the profiles and history stored for the server."""
        self._history_service.remove_all_data_for_instance(server)

    def _can_start_step(self, step_name: str, server: Instance) -> bool:
        if self.is_busy or self._state is not ConnectionState.READY:
            logger.warning(
                "Ignoring %s(%s): another step is in progress (state=%s).",
                step_name, server.sanitized_base_url, self._state.name
            )
            return False
        return True

    def _start_step(self, coroutine) -> asyncio.Task:
        self._pending_task = asyncio.create_task(coroutine)
        attempt = self._attempt
        self._pending_task.add_done_callback(
            lambda task: self._on_step_stopped(task, attempt)
        )
        return self._pending_task

    def _on_step_stopped(self, task: asyncio.Task, attempt: int):
        # A cancelled step never reaches the point where it resets the state.
        if task.cancelled() and self._is_relevant(attempt):
            logger.warning("Step cancelled while %s.", self._state.name)
            self._set_state(ConnectionState.READY)

    def _is_relevant(self, attempt: int) -> bool:
        return attempt == self._attempt

    async def _discover_api(self, server: Instance, attempt: int):
        try:
            await self._discovery_client.add_server(server)
        except Exception as exc:  # pylint: disable=broad-except
            if not self._is_relevant(attempt):
                logger.warning("Discarding stale discovery error for %s.", server.base_url)
                return

            error = DiscoveryFailure(
                f"Unable to discover API for server {server.sanitized_base_url}. "
                f"Error: {exc!r}"
            )
            error.__cause__ = exc
            logger.exception("Error while fetching discovered API.")
            self._show_error(error, constants.ERROR_DIALOG_TITLE)
            return

        if not self._is_relevant(attempt):
            logger.warning("Discarding stale discovery result for %s.", server.base_url)
            return

        # Authorization (if any) is over once the server has been added.
        self._set_state(ConnectionState.DISCOVERING_API)
        await self._fetch_profiles_and_connect(server, attempt)

    async def _fetch_profiles_and_connect(self, server: Instance, attempt: int):
        action: ParentAction
        try:
            serialized_config = await self._discovery_client.get_config(server, False)
            if not self._is_relevant(attempt):
                logger.warning("Discarding stale VPN config for %s.", server.base_url)
                return

            descriptor = self._config_parser.parse_config(
                server, self._discovery_client.last_selected_profile, serialized_config
            )
            self._preferences_service.set_current_protocol(serialized_config.protocol_kind)
            action = ConnectWithConfig(descriptor)
        except ProfileSelectionRequired as exc:
            logger.info("A profile has to be selected for %s.", server.base_url)
            action = OpenProfileSelector(tuple(exc.profiles))
        except Exception as exc:  # pylint: disable=broad-except
            error = ConfigFetchFailure(repr(exc))
            error.__cause__ = exc
            logger.exception("Error while fetching VPN config.")
            action = DisplayError(constants.ERROR_DOWNLOADING_VPN_CONFIG_TITLE, str(error))

        if not self._is_relevant(attempt):
            logger.warning("Discarding stale outcome for %s: %s", server.base_url, action)
            return

        self._set_state(ConnectionState.READY)
        self._parent_action.post(action)

    def _show_error(self, error: Exception, title: str):
        self._set_state(ConnectionState.READY)
        self._parent_action.post(DisplayError(title, str(error)))

    def _set_state(self, state: ConnectionState):
        if state is not self._state:
            logger.info("Connection state changed: %s -> %s", self._state.name, state.name)
        self._state = state
