"""
Parser for WireGuard configuration documents (wg-quick format).


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
import base64
import binascii
import ipaddress
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from proton.vpn.federation.exceptions import WireGuardConfigParseError

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]
IPInterface = Union[ipaddress.IPv4Interface, ipaddress.IPv6Interface]

KEY_LENGTH = 32


@dataclass(frozen=True)
class WireGuardInterface:
    """The [Interface] section: the local end of the tunnel."""
    private_key: str
    addresses: Tuple[IPInterface, ...] = ()
    dns_servers: Tuple[str, ...] = ()
    dns_search_domains: Tuple[str, ...] = ()
    listen_port: Optional[int] = None
    mtu: Optional[int] = None


@dataclass(frozen=True)
class WireGuardPeer:
    """A [Peer] section: a remote end of the tunnel."""
    public_key: str
    preshared_key: Optional[str] = None
    allowed_ips: Tuple[IPNetwork, ...] = ()
    endpoint: Optional[str] = None
    persistent_keepalive: Optional[int] = None

    @property
    def endpoint_host_and_port(self) -> Tuple[str, int]:
        """Splits the endpoint into host and port (IPv6 hosts are unbracketed)."""
        host, _, port = self.endpoint.rpartition(":")
        return host.strip("[]"), int(port)


@dataclass(frozen=True)
class WireGuardConfig:
    """A parsed WireGuard configuration document."""
    interface: WireGuardInterface
    peers: Tuple[WireGuardPeer, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, text: str) -> "WireGuardConfig":
        """
        Parses a WireGuard configuration document.

        :param text: contents of the configuration document.
        :returns: the parsed configuration.
        :raises WireGuardConfigParseError: if the document is not valid.
        """
        return _Parser().parse(text)


def _parse_key(value: str, line_number: int) -> str:
    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise WireGuardConfigParseError(f"Invalid key: {value!r}", line_number) from exc

    if len(decoded) != KEY_LENGTH:
        raise WireGuardConfigParseError(f"Invalid key length: {value!r}", line_number)
    return value


def _parse_int(value: str, line_number: int, minimum: int, maximum: int) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise WireGuardConfigParseError(f"Invalid number: {value!r}", line_number) from exc

    if not minimum <= number <= maximum:
        raise WireGuardConfigParseError(f"Number out of range: {value!r}", line_number)
    return number


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_endpoint(value: str, line_number: int) -> str:
    host, separator, port = value.rpartition(":")
    if not separator or not host or host in ("[", "[]"):
        raise WireGuardConfigParseError(f"Invalid endpoint: {value!r}", line_number)
    _parse_int(port, line_number, 1, 65535)
    return value


class _Parser:
    """Line based parser keeping the raw key/value pairs of each section."""

    INTERFACE = "interface"
    PEER = "peer"

    def __init__(self):
        self._interface: Optional[Dict[str, Tuple[str, int]]] = None
        self._peers: List[Dict[str, Tuple[str, int]]] = []
        self._current: Optional[Dict[str, Tuple[str, int]]] = None

    def parse(self, text: str) -> WireGuardConfig:
        if text is None:
            raise WireGuardConfigParseError("Empty configuration")

        for line_number, line in enumerate(text.splitlines(), start=1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue

            if line.startswith("[") and line.endswith("]"):
                self._start_section(line[1:-1].strip().lower(), line_number)
                continue

            if self._current is None:
                raise WireGuardConfigParseError("Key outside of a section", line_number)

            key, separator, value = line.partition("=")
            if not separator:
                raise WireGuardConfigParseError(f"Invalid line: {line!r}", line_number)

            key = key.strip().lower()
            # Address, DNS and AllowedIPs can be repeated.
            if key in self._current and key in ("address", "dns", "allowedips"):
                previous, _ = self._current[key]
                value = f"{previous},{value}"
            self._current[key] = (value.strip(), line_number)

        if self._interface is None:
            raise WireGuardConfigParseError("Missing [Interface] section")

        return WireGuardConfig(
            interface=self._build_interface(self._interface),
            peers=tuple(self._build_peer(peer) for peer in self._peers)
        )

    def _start_section(self, name: str, line_number: int):
        if name == self.INTERFACE:
            if self._interface is not None:
                raise WireGuardConfigParseError("Duplicate [Interface] section", line_number)
            self._interface = {}
            self._current = self._interface
        elif name == self.PEER:
            self._current = {}
            self._peers.append(self._current)
        else:
            raise WireGuardConfigParseError(f"Unknown section: [{name}]", line_number)

    @staticmethod
    def _build_interface(attributes: Dict[str, Tuple[str, int]]) -> WireGuardInterface:
        if "privatekey" not in attributes:
            raise WireGuardConfigParseError("Missing PrivateKey in [Interface] section")

        kwargs = {}
        for key, (value, line_number) in attributes.items():
            if key == "privatekey":
                kwargs["private_key"] = _parse_key(value, line_number)
            elif key == "address":
                try:
                    kwargs["addresses"] = tuple(
                        ipaddress.ip_interface(address) for address in _split_list(value)
                    )
                except ValueError as exc:
                    raise WireGuardConfigParseError(
                        f"Invalid address: {value!r}", line_number
                    ) from exc
            elif key == "dns":
                # Entries that are not IP addresses are DNS search domains.
                servers, domains = [], []
                for entry in _split_list(value):
                    try:
                        servers.append(str(ipaddress.ip_address(entry)))
                    except ValueError:
                        domains.append(entry)
                kwargs["dns_servers"] = tuple(servers)
                kwargs["dns_search_domains"] = tuple(domains)
            elif key == "listenport":
                kwargs["listen_port"] = _parse_int(value, line_number, 0, 65535)
            elif key == "mtu":
                kwargs["mtu"] = _parse_int(value, line_number, 576, 65535)
            else:
                raise WireGuardConfigParseError(
                    f"Unknown [Interface] attribute: {key!r}", line_number
                )

        return WireGuardInterface(**kwargs)

    @staticmethod
    def _build_peer(attributes: Dict[str, Tuple[str, int]]) -> WireGuardPeer:
        if "publickey" not in attributes:
            raise WireGuardConfigParseError("Missing PublicKey in [Peer] section")

        kwargs = {}
        for key, (value, line_number) in attributes.items():
            if key == "publickey":
                kwargs["public_key"] = _parse_key(value, line_number)
            elif key == "presharedkey":
                kwargs["preshared_key"] = _parse_key(value, line_number)
            elif key == "allowedips":
                try:
                    kwargs["allowed_ips"] = tuple(
                        ipaddress.ip_network(network, strict=False)
                        for network in _split_list(value)
                    )
                except ValueError as exc:
                    raise WireGuardConfigParseError(
                        f"Invalid allowed IPs: {value!r}", line_number
                    ) from exc
            elif key == "endpoint":
                kwargs["endpoint"] = _parse_endpoint(value, line_number)
            elif key == "persistentkeepalive":
                if value.lower() == "off":
                    continue
                kwargs["persistent_keepalive"] = _parse_int(value, line_number, 0, 65535)
            else:
                raise WireGuardConfigParseError(
                    f"Unknown [Peer] attribute: {key!r}", line_number
                )

        return WireGuardPeer(**kwargs)
