"""
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
from typing import Optional

from proton.vpn.federation.serialization.entities import DEFAULT_LANGUAGE, Instance


def format_profile_name(
        server: Instance, profile_id: Optional[str], language: str = DEFAULT_LANGUAGE
) -> str:
    """Returns the name shown to the user for a connection to the given server profile."""
    server_name = server.get_display_name(language)
    if not profile_id:
        return server_name
    return f"{server_name} - {profile_id}"
