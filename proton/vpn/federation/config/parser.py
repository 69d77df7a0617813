"""
Turns serialized VPN configurations into protocol specific connection descriptors.


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
import logging
from typing import Callable, Optional

from proton.vpn.federation.config.descriptors import (
    ConnectionDescriptor, OpenVPNProfile, WireGuardProfile
)
from proton.vpn.federation.config.formatting import format_profile_name
from proton.vpn.federation.config.wireguard import WireGuardConfig
from proton.vpn.federation.enum import Protocol
from proton.vpn.federation.exceptions import InvalidConfig
from proton.vpn.federation.interfaces import OpenVPNImporter
from proton.vpn.federation.serialization.entities import Instance, SerializedVpnConfig

logger = logging.getLogger(__name__)


class VPNConfigParser:
    """
    Parses the configurations returned by the discovery client.

    :param openvpn_importer: imports OpenVPN configurations.
    :param wireguard_parser: parses WireGuard configuration documents. Parse
        errors are propagated unchanged.
    """

    def __init__(
            self,
            openvpn_importer: OpenVPNImporter,
            wireguard_parser: Callable[[str], WireGuardConfig] = WireGuardConfig.parse
    ):
        self._openvpn_importer = openvpn_importer
        self._wireguard_parser = wireguard_parser

    def parse_config(
            self,
            server: Instance,
            last_selected_profile_id: Optional[str],
            serialized_config: SerializedVpnConfig
    ) -> ConnectionDescriptor:
        """
        Parses the serialized configuration according to its protocol.

        :raises InvalidConfig: if the protocol is not supported or the
            OpenVPN configuration could not be imported.
        """
        protocol = serialized_config.protocol_kind

        if protocol is Protocol.OPENVPN:
            name = format_profile_name(server, last_selected_profile_id)
            handle = self._openvpn_importer.import_config(serialized_config.config, name)
            if handle is None:
                raise InvalidConfig("Unable to parse profile")
            logger.debug("OpenVPN profile %r imported.", name)
            return OpenVPNProfile(handle=handle, name=name)

        if protocol is Protocol.WIREGUARD:
            config = self._wireguard_parser(serialized_config.config)
            return WireGuardProfile(
                config=config,
                name=format_profile_name(server, last_selected_profile_id)
            )

        raise InvalidConfig(f"Unexpected protocol type: {serialized_config.protocol}")
