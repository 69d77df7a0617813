"""
Interfaces of the collaborators the connection orchestrator depends on.


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
from abc import ABC, abstractmethod
from typing import Any, Optional, TYPE_CHECKING

from proton.vpn.federation.enum import Protocol

if TYPE_CHECKING:
    from proton.vpn.federation.config.descriptors import ConnectionDescriptor
    from proton.vpn.federation.serialization.entities import (
        Instance, Profile, SerializedVpnConfig
    )


class DiscoveryClient(ABC):
    """Registers servers and fetches VPN configurations from them."""

    @abstractmethod
    async def add_server(self, server: "Instance") -> Any:
        """
        Registers the server, resolving its API capabilities and authorizing
        the user if needed.
        :returns: the API capabilities of the server.
        """

    @abstractmethod
    async def get_config(self, server: "Instance", force_tcp: bool) -> "SerializedVpnConfig":
        """
        Fetches a VPN configuration for the last selected profile.
        :raises ProfileSelectionRequired: when a profile has to be selected first.
        """

    @abstractmethod
    def select_profile(self, profile: "Profile"):
        """Records the profile to be used by the following configuration fetches."""

    @property
    @abstractmethod
    def last_selected_profile(self) -> Optional[str]:
        """Identifier of the last selected profile, if any."""


class OpenVPNImporter(ABC):
    """Imports OpenVPN configuration files."""

    @abstractmethod
    def import_config(self, config: str, display_name: str) -> Optional[Any]:
        """
        Imports the OpenVPN configuration.
        :returns: a handle to the imported configuration, or None if it could not be imported.
        """


class HistoryService(ABC):
    """Keeps the profiles and connection history of each server."""

    @abstractmethod
    def remove_all_data_for_instance(self, server: "Instance"):
        """Removes everything stored for the server."""


class PreferencesService(ABC):
    """Stores the user preferences."""

    @abstractmethod
    def set_current_protocol(self, protocol: Protocol):
        """Stores the protocol of the last configuration."""

    @abstractmethod
    def get_current_instance(self) -> Optional["Instance"]:
        """Returns the server currently in use, if any."""


class PlatformVPN(ABC):
    """The platform VPN backend, which actually establishes the tunnels."""

    @abstractmethod
    async def connection_to_config(self, descriptor: "ConnectionDescriptor") -> Any:
        """
        Starts a VPN connection for the descriptor.
        :returns: a handle to the VPN connection.
        """

    @abstractmethod
    async def disconnect(self, handle: Any):
        """Tears down the VPN connection."""
