"""
Protocol specific connection descriptors, ready to be handed to a VPN backend.


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
from dataclasses import dataclass
from typing import Any, Union

from proton.vpn.federation.config.wireguard import WireGuardConfig
from proton.vpn.federation.enum import Protocol


@dataclass(frozen=True)
class OpenVPNProfile:
    """
    An OpenVPN configuration imported by the OpenVPN import collaborator.

    ``handle`` is whatever the importer returned (e.g. an NM.SimpleConnection).
    """
    handle: Any
    name: str
    protocol = Protocol.OPENVPN


@dataclass(frozen=True)
class WireGuardProfile:
    """A parsed WireGuard configuration."""
    config: WireGuardConfig
    name: str = None
    protocol = Protocol.WIREGUARD


ConnectionDescriptor = Union[OpenVPNProfile, WireGuardProfile]
