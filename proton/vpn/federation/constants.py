"""
Application-wide constant values.


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

# Default values applied when the persisted settings omit a field.
USE_CUSTOM_TABS_DEFAULT_VALUE = True
PREFER_TCP_DEFAULT_VALUE = False

# Titles of the error dialogs shown to the user.
ERROR_DIALOG_TITLE = "Error"
ERROR_DOWNLOADING_VPN_CONFIG_TITLE = "Error downloading VPN configuration"

# NM.SettingWireGuard was added in NetworkManager 1.16.
WIREGUARD_MIN_NM_VERSION = "1.16.0"
