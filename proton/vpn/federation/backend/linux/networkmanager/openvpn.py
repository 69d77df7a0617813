"""
Imports OpenVPN configurations with the NetworkManager VPN editor plugins.


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
import os
import tempfile
from contextlib import contextmanager
from getpass import getuser
from typing import Iterator, Optional

import gi
gi.require_version("NM", "1.0")  # noqa: required before importing NM module
# pylint: disable=wrong-import-position
from gi.repository import NM, GLib

from proton.vpn.federation.interfaces import OpenVPNImporter

logger = logging.getLogger(__name__)


@contextmanager
def _config_file(config: str) -> Iterator[str]:
    """Writes the config to a temporary file only readable by the user."""
    file_descriptor, filename = tempfile.mkstemp(suffix=".ovpn")
    try:
        with os.fdopen(file_descriptor, "w", encoding="utf-8") as file:
            file.write(config)
        yield filename
    finally:
        os.remove(filename)


class NMOpenVPNImporter(OpenVPNImporter):
    """OpenVPN importer based on the NetworkManager VPN editor plugins."""

    def import_config(self, config: str, display_name: str) -> Optional[NM.SimpleConnection]:
        """
        Imports the OpenVPN configuration into a NetworkManager connection.

        :returns: the imported connection, or None if no plugin could import it.
        """
        connection = None
        with _config_file(config) as filename:
            for plugin in NM.VpnPluginInfo.list_load():
                # returns a NM.SimpleConnection (NM.Connection)
                # https://lazka.github.io/pgi-docs/NM-1.0/classes/SimpleConnection.html
                try:
                    connection = plugin.load_editor_plugin().import_(filename)
                    break
                except GLib.Error:
                    continue

        if connection is None:
            logger.warning("No NetworkManager VPN plugin could import %r.", display_name)
            return None

        connection_settings = connection.get_setting_connection()
        connection_settings.set_property(NM.SETTING_CONNECTION_ID, display_name)
        connection_settings.add_permission(NM.SETTING_USER_SETTING_NAME, getuser(), None)

        # https://lazka.github.io/pgi-docs/NM-1.0/classes/Connection.html#NM.Connection.normalize
        connection.normalize()

        return connection
