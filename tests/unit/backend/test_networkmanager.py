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
from concurrent.futures import Future
from unittest.mock import Mock, patch

import pytest

try:
    from gi.repository import GLib
    from proton.vpn.federation.backend.linux.networkmanager.platform import NetworkManagerVPN
except (ImportError, ValueError):
    pytest.skip("NetworkManager GObject bindings are not available.", allow_module_level=True)

from proton.vpn.federation.config.descriptors import OpenVPNProfile, WireGuardProfile
from proton.vpn.federation.config.wireguard import WireGuardConfig
from proton.vpn.federation.exceptions import NetworkManagerError

from tests.boilerplate import WIREGUARD_CONFIG

PLATFORM_MODULE = "proton.vpn.federation.backend.linux.networkmanager.platform"


def resolved_future(result=None, exception=None) -> Future:
    future = Future()
    if exception:
        future.set_exception(exception)
    else:
        future.set_result(result)
    return future


@pytest.fixture
def nm_client_mock():
    nm_client = Mock()
    nm_client.get_version.return_value = "1.42.4"
    return nm_client


@pytest.mark.asyncio
async def test_connection_to_config_adds_and_starts_openvpn_connection(nm_client_mock):
    descriptor = OpenVPNProfile(handle=Mock(), name="Example VPN - internet")
    remote_connection, active_connection = Mock(), Mock()
    nm_client_mock.add_connection_async.return_value = resolved_future(remote_connection)
    nm_client_mock.start_connection_async.return_value = resolved_future(active_connection)

    handle = await NetworkManagerVPN(nm_client_mock).connection_to_config(descriptor)

    assert handle is active_connection
    nm_client_mock.add_connection_async.assert_called_once_with(descriptor.handle)
    nm_client_mock.start_connection_async.assert_called_once_with(remote_connection)


@pytest.mark.asyncio
@patch(f"{PLATFORM_MODULE}.build_wireguard_connection")
async def test_connection_to_config_builds_wireguard_connection(
        build_wireguard_connection, nm_client_mock
):
    descriptor = WireGuardProfile(config=WireGuardConfig.parse(WIREGUARD_CONFIG), name="Example")
    nm_client_mock.add_connection_async.return_value = resolved_future(Mock())
    nm_client_mock.start_connection_async.return_value = resolved_future(Mock())

    await NetworkManagerVPN(nm_client_mock).connection_to_config(descriptor)

    build_wireguard_connection.assert_called_once_with(descriptor.config, "Example")
    nm_client_mock.add_connection_async.assert_called_once_with(
        build_wireguard_connection.return_value
    )


@pytest.mark.asyncio
async def test_connection_to_config_rejects_wireguard_on_old_network_manager(nm_client_mock):
    nm_client_mock.get_version.return_value = "1.14.6"
    descriptor = WireGuardProfile(config=WireGuardConfig.parse(WIREGUARD_CONFIG))

    with pytest.raises(NetworkManagerError):
        await NetworkManagerVPN(nm_client_mock).connection_to_config(descriptor)

    nm_client_mock.add_connection_async.assert_not_called()


@pytest.mark.asyncio
async def test_connection_to_config_removes_connection_when_activation_fails(nm_client_mock):
    remote_connection = Mock()
    nm_client_mock.add_connection_async.return_value = resolved_future(remote_connection)
    nm_client_mock.start_connection_async.return_value = resolved_future(
        exception=GLib.GError()
    )
    nm_client_mock.remove_connection_async.return_value = resolved_future()

    with pytest.raises(NetworkManagerError):
        await NetworkManagerVPN(nm_client_mock).connection_to_config(
            OpenVPNProfile(handle=Mock(), name="Example")
        )

    nm_client_mock.remove_connection_async.assert_called_once_with(remote_connection)


@pytest.mark.asyncio
async def test_disconnect_removes_the_connection(nm_client_mock):
    active_connection = Mock()
    nm_client_mock.remove_connection_async.return_value = resolved_future()

    await NetworkManagerVPN(nm_client_mock).disconnect(active_connection)

    nm_client_mock.remove_connection_async.assert_called_once_with(
        active_connection.get_connection.return_value
    )
