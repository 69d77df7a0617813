"""
Platform VPN backend based on Linux NetworkManager.


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

from packaging.version import Version

from proton.vpn.federation import constants
from proton.vpn.federation.backend.linux.networkmanager.nmclient import NM, NMClient, GLib
from proton.vpn.federation.backend.linux.networkmanager.wireguard import (
    build_wireguard_connection
)
from proton.vpn.federation.config.descriptors import (
    ConnectionDescriptor, OpenVPNProfile, WireGuardProfile
)
from proton.vpn.federation.exceptions import NetworkManagerError
from proton.vpn.federation.interfaces import PlatformVPN

logger = logging.getLogger(__name__)


class NetworkManagerVPN(PlatformVPN):
    """
    Starts and stops the VPN connections described by the connection
    descriptors using NetworkManager.

    OpenVPN descriptors already carry the NM connection imported by
    NMOpenVPNImporter, while WireGuard descriptors are turned into an NM
    connection here.
    """

    def __init__(self, nm_client: NMClient = None):
        self.__nm_client = nm_client

    @property
    def nm_client(self) -> NMClient:
        """Returns the NetworkManager client."""
        if not self.__nm_client:
            self.__nm_client = NMClient()

        return self.__nm_client

    async def connection_to_config(self, descriptor: ConnectionDescriptor) -> NM.ActiveConnection:
        """
        Adds the connection for the descriptor to NetworkManager and activates it.

        :returns: the active connection.
        :raises NetworkManagerError: if the connection could not be added or started.
        """
        connection = self._get_nm_connection(descriptor)
        loop = asyncio.get_running_loop()

        try:
            future_connection = self.nm_client.add_connection_async(connection)
            remote_connection = await loop.run_in_executor(None, future_connection.result)
        except GLib.GError as exc:
            logger.exception("Error adding NetworkManager connection.")
            raise NetworkManagerError("Error adding NetworkManager connection") from exc

        try:
            future_vpn_connection = self.nm_client.start_connection_async(remote_connection)
            active_connection = await loop.run_in_executor(None, future_vpn_connection.result)
        except GLib.GError as exc:
            logger.exception("Error starting NetworkManager connection.")
            await self._remove_connection(remote_connection)
            raise NetworkManagerError("Error starting NetworkManager connection") from exc

        logger.info("VPN connection %r started.", descriptor.name)
        return active_connection

    async def disconnect(self, handle: NM.ActiveConnection):
        """Removes the VPN connection, which also tears it down."""
        connection = handle.get_connection() if handle else None
        if not connection:
            logger.warning("Nothing to disconnect.")
            return

        await self._remove_connection(connection)
        logger.info("VPN connection removed.")

    async def _remove_connection(self, connection: NM.RemoteConnection):
        future = self.nm_client.remove_connection_async(connection)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, future.result)

    def _get_nm_connection(self, descriptor: ConnectionDescriptor) -> NM.Connection:
        if isinstance(descriptor, OpenVPNProfile):
            return descriptor.handle

        if isinstance(descriptor, WireGuardProfile):
            nm_version = self.nm_client.get_version()
            if Version(nm_version) < Version(constants.WIREGUARD_MIN_NM_VERSION):
                raise NetworkManagerError(
                    f"WireGuard is not supported by NetworkManager {nm_version}"
                )
            return build_wireguard_connection(descriptor.config, descriptor.name or "WireGuard")

        raise TypeError(f"Unexpected connection descriptor: {descriptor!r}")
