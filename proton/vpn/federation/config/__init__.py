"""
VPN configuration parsing.


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
from proton.vpn.federation.config.descriptors import (
    ConnectionDescriptor, OpenVPNProfile, WireGuardProfile
)
from proton.vpn.federation.config.formatting import format_profile_name
from proton.vpn.federation.config.parser import VPNConfigParser
from proton.vpn.federation.config.wireguard import (
    WireGuardConfig, WireGuardInterface, WireGuardPeer
)

__all__ = [
    "ConnectionDescriptor", "OpenVPNProfile", "WireGuardProfile", "format_profile_name",
    "VPNConfigParser", "WireGuardConfig", "WireGuardInterface", "WireGuardPeer"
]
