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
from unittest.mock import Mock, patch

import pytest

try:
    from gi.repository import GLib, NM
    from proton.vpn.federation.backend.linux.networkmanager.openvpn import NMOpenVPNImporter
except (ImportError, ValueError):
    pytest.skip("NetworkManager GObject bindings are not available.", allow_module_level=True)

from tests.boilerplate import OPENVPN_CONFIG

OPENVPN_MODULE = "proton.vpn.federation.backend.linux.networkmanager.openvpn"


def create_plugin(imported_connection=None, error=None):
    plugin = Mock()
    editor = plugin.load_editor_plugin.return_value
    if error:
        editor.import_.side_effect = error
    else:
        editor.import_.return_value = imported_connection
    return plugin


@patch(f"{OPENVPN_MODULE}.NM.VpnPluginInfo.list_load")
def test_import_config_names_and_normalizes_the_imported_connection(list_load):
    imported_connection = Mock()
    list_load.return_value = [create_plugin(error=GLib.Error()), create_plugin(imported_connection)]

    connection = NMOpenVPNImporter().import_config(OPENVPN_CONFIG, "Example VPN - internet")

    assert connection is imported_connection
    connection_settings = imported_connection.get_setting_connection.return_value
    connection_settings.set_property.assert_called_once_with(
        NM.SETTING_CONNECTION_ID, "Example VPN - internet"
    )
    imported_connection.normalize.assert_called_once()


@patch(f"{OPENVPN_MODULE}.NM.VpnPluginInfo.list_load")
def test_import_config_returns_none_when_no_plugin_can_import_it(list_load):
    list_load.return_value = [create_plugin(error=GLib.Error())]

    assert NMOpenVPNImporter().import_config(OPENVPN_CONFIG, "Example VPN") is None


@patch(f"{OPENVPN_MODULE}.NM.VpnPluginInfo.list_load")
def test_import_config_removes_the_temporary_config_file(list_load):
    imported_files = []

    def import_(filename):
        with open(filename, encoding="utf-8") as file:
            imported_files.append((filename, file.read()))
        return Mock()

    plugin = create_plugin()
    plugin.load_editor_plugin.return_value.import_.side_effect = import_
    list_load.return_value = [plugin]

    NMOpenVPNImporter().import_config(OPENVPN_CONFIG, "Example VPN")

    filename, content = imported_files[0]
    assert filename.endswith(".ovpn")
    assert content == OPENVPN_CONFIG
    with pytest.raises(FileNotFoundError):
        open(filename, encoding="utf-8")  # pylint: disable=consider-using-with


@patch(f"{OPENVPN_MODULE}.NM.VpnPluginInfo.list_load")
def test_import_config_skips_plugins_without_editor(list_load):
    imported_connection = Mock()
    plugin_without_editor = Mock()
    plugin_without_editor.load_editor_plugin.side_effect = GLib.Error()
    list_load.return_value = [plugin_without_editor, create_plugin(imported_connection)]

    connection = NMOpenVPNImporter().import_config(OPENVPN_CONFIG, "Example VPN")

    assert connection is imported_connection
