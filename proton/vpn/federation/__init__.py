"""
Client-side orchestration of VPN sessions against federated VPN servers.


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
from proton.vpn.federation.core import (
    ConnectionOrchestrator, ConnectWithConfig, DisplayError, OpenProfileSelector
)
from proton.vpn.federation.enum import ConnectionState, Protocol

__all__ = [
    "ConnectionOrchestrator", "ConnectWithConfig", "DisplayError", "OpenProfileSelector",
    "ConnectionState", "Protocol"
]
