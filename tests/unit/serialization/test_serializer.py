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
import json
from datetime import datetime, timezone

import pytest

from proton.vpn.federation import constants
from proton.vpn.federation.enum import Protocol, ServerType
from proton.vpn.federation.exceptions import UnknownFormatException
from proton.vpn.federation.serialization import SerializerService, Settings

from tests.boilerplate import create_server


@pytest.fixture
def serializer():
    return SerializerService()


def test_settings_round_trip(serializer):
    settings = Settings(use_custom_tabs=False, prefer_tcp=True)

    serialized = serializer.serialize_app_settings(settings)

    assert serialized == {"use_custom_tabs": False, "prefer_tcp": True}
    assert serializer.deserialize_app_settings(serialized) == settings
    assert serializer.deserialize_app_settings(json.dumps(serialized)) == settings


def test_settings_missing_fields_take_default_values(serializer):
    settings = serializer.deserialize_app_settings("{}")

    assert settings.use_custom_tabs is constants.USE_CUSTOM_TABS_DEFAULT_VALUE
    assert settings.prefer_tcp is constants.PREFER_TCP_DEFAULT_VALUE


def test_settings_with_only_use_custom_tabs(serializer):
    settings = serializer.deserialize_app_settings({"use_custom_tabs": True})

    assert settings == Settings(
        use_custom_tabs=True, prefer_tcp=constants.PREFER_TCP_DEFAULT_VALUE
    )


def test_settings_with_invalid_value_raise_unknown_format(serializer):
    with pytest.raises(UnknownFormatException):
        serializer.deserialize_app_settings({"prefer_tcp": "maybe"})


@pytest.mark.parametrize("method_name", [
    "deserialize_profile_list",
    "deserialize_instance",
    "deserialize_app_settings",
    "deserialize_organization_list",
    "deserialize_server_list",
    "deserialize_cookie_and_string_data",
    "deserialize_cookie_and_string_array_data",
    "deserialize_cookie_and_profile_map_data",
    "deserialize_added_servers",
    "deserialize_serialized_vpn_config",
    "deserialize_current_server",
    "deserialize_cert_expiry_times",
])
@pytest.mark.parametrize("payload", [None, "", "{", "not json", "[1, 2", "{\"a\": }"])
def test_malformed_payloads_raise_unknown_format(serializer, method_name, payload):
    with pytest.raises(UnknownFormatException):
        getattr(serializer, method_name)(payload)


def test_unknown_format_wraps_the_original_error(serializer):
    with pytest.raises(UnknownFormatException) as exc_info:
        serializer.deserialize_serialized_vpn_config('{"protocol": 1}')

    assert exc_info.value.__cause__ is not None


def test_instance_serialization(serializer):
    server = create_server()

    assert serializer.deserialize_instance(serializer.serialize_instance(server)) == server


def test_instance_ignores_unknown_fields_and_accepts_untranslated_names(serializer):
    server = serializer.deserialize_instance(json.dumps({
        "base_url": "https://vpn.example.org/",
        "display_name": "Example VPN",
        "server_type": 1,
        "public_key_list": ["key"],
    }))

    assert server.get_display_name() == "Example VPN"
    assert server.server_type is ServerType.INSTITUTE_ACCESS
    assert server.sanitized_base_url == "https://vpn.example.org"


def test_deserialize_server_list(serializer):
    server_list = serializer.deserialize_server_list(json.dumps({
        "v": 1690000000,
        "server_list": [
            {
                "base_url": "https://vpn.example.org/",
                "display_name": {"en": "Example VPN", "nl": "Voorbeeld VPN"},
                "server_type": 1,
                "support_contact": ["mailto:support@example.org"],
            },
            {
                "base_url": "https://nl.example.org/",
                "country_code": "NL",
                "server_type": 2,
            },
        ],
    }))

    assert server_list.version == 1690000000
    assert len(server_list.server_list) == 2
    assert server_list.server_list[0].get_display_name("nl") == "Voorbeeld VPN"
    assert server_list.server_list[1].get_display_name() == "nl.example.org"


def test_deserialize_organization_list(serializer):
    organization_list = serializer.deserialize_organization_list(json.dumps({
        "organization_list": [{
            "org_id": "https://idp.example.org",
            "display_name": {"en": "Example University"},
            "secure_internet_home": "https://nl.example.org/",
            "keyword_list": {"en": "example university"},
        }]
    }))

    organization = organization_list.organization_list[0]
    assert organization.org_id == "https://idp.example.org"
    assert organization.secure_internet_home == "https://nl.example.org/"


def test_deserialize_profile_list(serializer):
    profiles = serializer.deserialize_profile_list(json.dumps([
        {"identifier": "internet", "display_name": "Internet", "supported_protocols": [1, 2, 9]},
        {"identifier": "office", "default_gateway": None},
    ]))

    assert [profile.profile_id for profile in profiles] == ["internet", "office"]
    assert profiles[0].protocols == [Protocol.OPENVPN, Protocol.WIREGUARD]
    # An explicit null falls back to the default value.
    assert profiles[1].default_gateway is False


def test_deserialize_cookie_payloads_coerce_scalars(serializer):
    string_data = serializer.deserialize_cookie_and_string_data('{"cookie": "12", "data": "x"}')
    array_data = serializer.deserialize_cookie_and_string_array_data(
        '{"cookie": 13, "data": ["a", "b"]}'
    )
    profile_data = serializer.deserialize_cookie_and_profile_map_data(json.dumps({
        "cookie": 14,
        "data": {"map": {"internet": {"identifier": "internet"}}, "current": "internet"},
    }))

    assert string_data.cookie == 12
    assert array_data.data == ["a", "b"]
    assert profile_data.data.profiles["internet"].profile_id == "internet"
    assert profile_data.data.current == "internet"


def test_deserialize_added_and_current_servers(serializer):
    server = {"identifier": "https://vpn.example.org/", "display_name": {"en": "Example"}}
    added_servers = serializer.deserialize_added_servers(json.dumps({
        "institute_access_servers": [server],
        "secure_internet_server": dict(server, country_code="NL"),
    }))
    current_server = serializer.deserialize_current_server(json.dumps({
        "type": 2,
        "secure_internet_server": dict(server, country_code="NL"),
    }))

    assert added_servers.custom_servers == []
    assert added_servers.institute_access_servers[0].identifier == "https://vpn.example.org/"
    assert added_servers.secure_internet_server.country_code == "NL"
    assert current_server.server_type is ServerType.SECURE_INTERNET
    assert current_server.server.country_code == "NL"


@pytest.mark.parametrize("protocol, expected", [
    ("openvpn", Protocol.OPENVPN),
    (1, Protocol.OPENVPN),
    ("2", Protocol.WIREGUARD),
    (5, None),
    (True, None),
    (False, None),
    (1.5, None),
    (1.0, None),
])
def test_deserialize_serialized_vpn_config(serializer, protocol, expected):
    vpn_config = serializer.deserialize_serialized_vpn_config(json.dumps({
        "config": "client", "protocol": protocol, "extra": True
    }))

    assert vpn_config.config == "client"
    assert vpn_config.protocol_kind is expected


@pytest.mark.parametrize("protocol", [True, 1.5])
def test_deserialize_serialized_vpn_config_keeps_raw_tag(serializer, protocol):
    vpn_config = serializer.deserialize_serialized_vpn_config(json.dumps({
        "config": "client", "protocol": protocol
    }))

    assert vpn_config.protocol == protocol
    assert type(vpn_config.protocol) is type(protocol)  # pylint: disable=unidiomatic-typecheck


def test_deserialize_cert_expiry_times_parses_dates_leniently(serializer):
    expiry = serializer.deserialize_cert_expiry_times(json.dumps({
        "start_time": 1700000000,
        "end_time": "2023-11-21T22:13:20Z",
        "button_time": "Tue, 21 Nov 2023 22:13:20 GMT",
        "countdown_time": "next tuesday",
        "notification_times": [1700000000, "garbage"],
    }))

    expected = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert expiry.start_time == expected
    assert expiry.end_time == datetime(2023, 11, 21, 22, 13, 20, tzinfo=timezone.utc)
    assert expiry.button_time == datetime(2023, 11, 21, 22, 13, 20, tzinfo=timezone.utc)
    assert expiry.countdown_time is None
    assert expiry.notification_times == [expected, None]
