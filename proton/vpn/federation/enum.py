"""
Enumerations shared by the connection orchestrator and its collaborators.


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
from enum import Enum, IntEnum
from typing import Optional, Union


class ConnectionState(Enum):
    """
    Coarse state of the connection orchestrator.

    READY:           No orchestration step is running.
    DISCOVERING_API: The server is being registered/resolved.
    AUTHORIZING:     The user is going through the external authorization flow.
    """
    READY = "ready"
    DISCOVERING_API = "discovering_api"
    AUTHORIZING = "authorizing"


class Protocol(IntEnum):
    """
    VPN protocols a server can hand out configurations for.

    The values match the numeric protocol tags used on the wire.
    """
    OPENVPN = 1
    WIREGUARD = 2

    @classmethod
    def from_wire(cls, value: Union[bool, int, float, str, None]) -> Optional["Protocol"]:
        """
        Maps a wire protocol tag to a Protocol.

        Tags can be either numeric (1, "1") or textual ("openvpn").
        :returns: the matching protocol or None if the tag is not supported.
        """
        if isinstance(value, str):
            value = value.strip()
            if value.isdigit():
                value = int(value)
            else:
                return cls.__members__.get(value.upper())

        if isinstance(value, bool) or not isinstance(value, int):
            return None

        try:
            return cls(value)
        except ValueError:
            return None


class ServerType(IntEnum):
    """Kind of server found in the server directory."""
    UNKNOWN = 0
    INSTITUTE_ACCESS = 1
    SECURE_INTERNET = 2
    CUSTOM = 3


class AuthorizationType(IntEnum):
    """How the user authorizes against a server."""
    LOCAL = 0
    DISTRIBUTED = 1
    ORGANIZATION = 2
