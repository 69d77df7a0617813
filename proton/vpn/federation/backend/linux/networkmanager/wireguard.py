"""
Builds NetworkManager WireGuard connections out of parsed WireGuard configurations.


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
import ipaddress
import socket
import uuid
from getpass import getuser

import gi
gi.require_version("NM", "1.0")  # noqa: required before importing NM module
# pylint: disable=wrong-import-position
from gi.repository import NM

from proton.vpn.federation.config.wireguard import WireGuardConfig

VIRTUAL_DEVICE_NAME = "wg-federation"
DNS_PRIORITY = -1500
DNS_SEARCH = "~"


def build_wireguard_connection(config: WireGuardConfig, name: str) -> NM.SimpleConnection:
    """
    Creates a NetworkManager connection for the WireGuard configuration.

    :param config: the parsed WireGuard configuration.
    :param name: the connection name shown to the user.
    :returns: the connection, ready to be added to NetworkManager.
    """
    connection = NM.SimpleConnection.new()

    connection_settings = NM.SettingConnection.new()
    connection_settings.set_property(NM.SETTING_CONNECTION_ID, name)
    connection_settings.set_property(NM.SETTING_CONNECTION_UUID, str(uuid.uuid4()))
    connection_settings.set_property(NM.SETTING_CONNECTION_INTERFACE_NAME, VIRTUAL_DEVICE_NAME)
    connection_settings.set_property(NM.SETTING_CONNECTION_TYPE, "wireguard")
    connection_settings.add_permission("user", getuser(), None)
    connection.add_setting(connection_settings)

    ipv4_config, ipv6_config = _build_ip_configs(config)
    connection.add_setting(ipv4_config)
    connection.add_setting(ipv6_config)

    connection.add_setting(_build_wireguard_setting(config))

    connection.verify()
    return connection


def _build_ip_configs(config: WireGuardConfig):
    ipv4_config = NM.SettingIP4Config.new()
    ipv6_config = NM.SettingIP6Config.new()

    ipv4_addresses = [a for a in config.interface.addresses if a.version == 4]
    ipv6_addresses = [a for a in config.interface.addresses if a.version == 6]

    for ip_config, addresses, family in (
            (ipv4_config, ipv4_addresses, socket.AF_INET),
            (ipv6_config, ipv6_addresses, socket.AF_INET6),
    ):
        if not addresses:
            ip_config.set_property(NM.SETTING_IP_CONFIG_METHOD, "disabled")
            continue

        ip_config.set_property(NM.SETTING_IP_CONFIG_METHOD, "manual")
        for address in addresses:
            ip_config.add_address(
                NM.IPAddress.new(family, str(address.ip), address.network.prefixlen)
            )
        ip_config.set_property(NM.SETTING_IP_CONFIG_DNS_PRIORITY, DNS_PRIORITY)
        ip_config.set_property(NM.SETTING_IP_CONFIG_IGNORE_AUTO_DNS, True)

    for dns_server in config.interface.dns_servers:
        if ipaddress.ip_address(dns_server).version == 4:
            ipv4_config.add_dns(dns_server)
        elif ipv6_addresses:
            ipv6_config.add_dns(dns_server)

    search_domains = config.interface.dns_search_domains or (DNS_SEARCH,)
    if config.interface.dns_servers:
        for domain in search_domains:
            ipv4_config.add_dns_search(domain)

    return ipv4_config, ipv6_config


def _build_wireguard_setting(config: WireGuardConfig) -> NM.SettingWireGuard:
    wireguard_config = NM.SettingWireGuard.new()
    wireguard_config.set_property(
        NM.SETTING_WIREGUARD_PRIVATE_KEY, config.interface.private_key
    )
    if config.interface.listen_port is not None:
        wireguard_config.set_property(
            NM.SETTING_WIREGUARD_LISTEN_PORT, config.interface.listen_port
        )
    if config.interface.mtu is not None:
        wireguard_config.set_property(NM.SETTING_WIREGUARD_MTU, config.interface.mtu)

    for peer_config in config.peers:
        peer = NM.WireGuardPeer.new()
        peer.set_public_key(peer_config.public_key, False)
        if peer_config.preshared_key:
            peer.set_preshared_key(peer_config.preshared_key, False)
        for network in peer_config.allowed_ips:
            peer.append_allowed_ip(str(network), False)
        if peer_config.endpoint:
            peer.set_endpoint(peer_config.endpoint, False)
        if peer_config.persistent_keepalive is not None:
            peer.set_persistent_keepalive(peer_config.persistent_keepalive)

        # Ensures that the configurations are valid
        # https://lazka.github.io/pgi-docs/index.html#NM-1.0/classes/WireGuardPeer.html#NM.WireGuardPeer.is_valid
        peer.is_valid(True, True)
        wireguard_config.append_peer(peer)

    return wireguard_config
