"""
Typed entities exchanged with the server directory, the discovery client
and the local persistence layer.


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
from typing import Annotated, Any, Dict, List, Optional, Union
from urllib.parse import urlparse

from pydantic import (
    BaseModel, BeforeValidator, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr,
    model_validator
)

from proton.vpn.federation import constants
from proton.vpn.federation.enum import AuthorizationType, Protocol, ServerType
from proton.vpn.federation.serialization.dates import LenientDatetime

DEFAULT_LANGUAGE = "en"


def _to_translations(value: Any) -> Any:
    # Untranslated strings are stored under the empty language tag.
    if isinstance(value, str):
        return {"": value}
    return value


TranslatableString = Annotated[Dict[str, str], BeforeValidator(_to_translations)]


def translate(translations: Dict[str, str], language: str = DEFAULT_LANGUAGE) -> Optional[str]:
    """
    Returns the best translation available for the specified language.

    Falls back to the untranslated value, then to the default language and
    finally to any translation available.
    """
    if not translations:
        return None

    for key in (language, "", DEFAULT_LANGUAGE):
        if translations.get(key):
            return translations[key]

    return next(iter(translations.values()))


class WireModel(BaseModel):
    """
    Base class for all the wire entities.

    Unknown fields are ignored, scalars are coerced when it is safe to do so
    and an explicit null for a field with a non-null default is replaced by
    that default.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls_with_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        for name, field in cls.model_fields.items():
            key = field.alias or name
            if key not in data or data[key] is not None or field.is_required():
                continue
            if field.get_default(call_default_factory=True) is not None:
                del data[key]

        return data


class Instance(WireModel):
    """A VPN server. Instances are immutable and can be used as dict keys."""
    model_config = ConfigDict(frozen=True)

    base_url: str
    display_name: TranslatableString = Field(default_factory=dict)
    server_type: ServerType = ServerType.UNKNOWN
    country_code: Optional[str] = None
    support_contact: List[str] = Field(default_factory=list)
    authorization_type: AuthorizationType = AuthorizationType.LOCAL

    def __hash__(self):
        return hash((self.base_url, self.server_type))

    @property
    def sanitized_base_url(self) -> str:
        """The base URL without trailing slashes."""
        return self.base_url.rstrip("/")

    @property
    def host(self) -> str:
        """The host name of the server."""
        return urlparse(self.base_url).hostname or self.sanitized_base_url

    def get_display_name(self, language: str = DEFAULT_LANGUAGE) -> str:
        """Returns the translated name of the server, or its host if it has no name."""
        return translate(self.display_name, language) or self.host


class ServerList(WireModel):
    """Servers listed in the server directory."""
    version: int = Field(default=0, alias="v")
    server_list: List[Instance] = Field(default_factory=list)


class Organization(WireModel):
    """An organization providing access to secure internet servers."""
    org_id: str
    display_name: TranslatableString = Field(default_factory=dict)
    secure_internet_home: Optional[str] = None
    keyword_list: TranslatableString = Field(default_factory=dict)


class OrganizationList(WireModel):
    """Organizations listed in the server directory."""
    version: int = Field(default=0, alias="v")
    organization_list: List[Organization] = Field(default_factory=list)


class Profile(WireModel):
    """A selectable connection profile offered by a server."""
    profile_id: str = Field(alias="identifier")
    display_name: TranslatableString = Field(default_factory=dict)
    default_gateway: bool = False
    supported_protocols: List[int] = Field(default_factory=list)

    @property
    def protocols(self) -> List[Protocol]:
        """The supported protocols known by this client."""
        return [
            protocol for protocol in map(Protocol.from_wire, self.supported_protocols)
            if protocol is not None
        ]


class ProfileMap(WireModel):
    """Profiles of a server, indexed by profile id."""
    profiles: Dict[str, Profile] = Field(default_factory=dict, alias="map")
    current: Optional[str] = None


class Settings(WireModel):
    """User settings."""
    use_custom_tabs: bool = constants.USE_CUSTOM_TABS_DEFAULT_VALUE
    prefer_tcp: bool = constants.PREFER_TCP_DEFAULT_VALUE


class CookieAndStringData(WireModel):
    """A string payload scoped to a session cookie."""
    cookie: int
    data: str


class CookieAndStringArrayData(WireModel):
    """A string list payload scoped to a session cookie."""
    cookie: int
    data: List[str]


class CookieAndProfileMapData(WireModel):
    """Profiles to choose from, scoped to a session cookie."""
    cookie: int
    data: ProfileMap


class AddedServer(WireModel):
    """A server the user has added."""
    identifier: str
    display_name: TranslatableString = Field(default_factory=dict)
    profiles: ProfileMap = Field(default_factory=ProfileMap)
    delisted: bool = False


class SecureInternetServer(AddedServer):
    """The secure internet server the user has added."""
    country_code: Optional[str] = None
    locations: List[str] = Field(default_factory=list)


class AddedServers(WireModel):
    """All the servers the user has added."""
    custom_servers: List[AddedServer] = Field(default_factory=list)
    institute_access_servers: List[AddedServer] = Field(default_factory=list)
    secure_internet_server: Optional[SecureInternetServer] = None


class CurrentServer(WireModel):
    """The server the user is currently connected to."""
    server_type: ServerType = Field(default=ServerType.UNKNOWN, alias="type")
    custom_server: Optional[AddedServer] = None
    institute_access_server: Optional[AddedServer] = None
    secure_internet_server: Optional[SecureInternetServer] = None

    @property
    def server(self) -> Optional[AddedServer]:
        """The current server of the current type, if any."""
        return {
            ServerType.CUSTOM: self.custom_server,
            ServerType.INSTITUTE_ACCESS: self.institute_access_server,
            ServerType.SECURE_INTERNET: self.secure_internet_server,
        }.get(self.server_type)


class CertExpiryTimes(WireModel):
    """When the VPN certificate of the current session expires."""
    start_time: LenientDatetime = None
    end_time: LenientDatetime = None
    button_time: LenientDatetime = None
    countdown_time: LenientDatetime = None
    notification_times: List[LenientDatetime] = Field(default_factory=list)


class SerializedVpnConfig(WireModel):
    """
    A VPN configuration as returned by the discovery client.

    The protocol tag is kept as received: tags not supported by this client
    are rejected when the configuration is parsed, not when it is decoded.
    """
    config: str
    # Strict types keep the tag as received, e.g. `true` is not coerced to 1.
    protocol: Union[StrictBool, StrictInt, StrictFloat, StrictStr]
    default_gateway: bool = False
    should_failover: bool = False

    @property
    def protocol_kind(self) -> Optional[Protocol]:
        """The protocol of this configuration, or None if it is not supported."""
        return Protocol.from_wire(self.protocol)
