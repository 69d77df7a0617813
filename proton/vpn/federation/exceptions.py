"""
Exceptions raised while setting up a VPN session against a federated server.


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
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from proton.vpn.federation.serialization.entities import Profile


class FederationError(Exception):
    """Base class for all errors raised by this package."""


class DiscoveryFailure(FederationError):
    """The server could not be registered/resolved."""


class ConfigFetchFailure(FederationError):
    """The VPN configuration could not be retrieved or parsed."""


class InvalidConfig(FederationError, ValueError):
    """
    The fetched configuration could not be turned into a connection descriptor,
    either because its protocol is not supported or because the protocol
    specific parsing failed.
    """


class WireGuardConfigParseError(InvalidConfig):
    """The WireGuard configuration document is malformed."""

    def __init__(self, message: str, line_number: int = None):
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)
        self.line_number = line_number


class UnknownFormatException(FederationError):
    """
    A wire payload could not be decoded into the expected entity.

    The original error (malformed JSON or schema mismatch) is available
    through ``__cause__``.
    """


class ProfileSelectionRequired(FederationError):
    """
    Raised by the discovery client when the user has to choose a profile
    before a configuration can be fetched.
    """

    def __init__(self, profiles: List["Profile"]):
        super().__init__(f"A profile has to be selected ({len(profiles)} available)")
        self.profiles = profiles


class NetworkManagerError(FederationError):
    """NetworkManager failed to add, start or remove a VPN connection."""
