"""
(De)serialization of the entities used by the orchestrator.


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
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

from proton.vpn.federation.exceptions import UnknownFormatException
from proton.vpn.federation.serialization.entities import (
    AddedServers, CertExpiryTimes, CookieAndProfileMapData, CookieAndStringArrayData,
    CookieAndStringData, CurrentServer, Instance, OrganizationList, Profile,
    SerializedVpnConfig, ServerList, Settings
)

T = TypeVar("T")

_PROFILE_LIST = TypeAdapter(List[Profile])


class SerializerService:
    """
    This service is responsible for (de)serializing the objects used by the
    connection orchestrator.

    All the deserialization methods either return a fully populated entity or
    raise UnknownFormatException, whether the payload was not valid JSON or
    it did not match the expected schema.
    """

    @staticmethod
    def _decode(adapter: Union[Type[T], TypeAdapter], payload: Optional[str]) -> T:
        if payload is None:
            raise UnknownFormatException("Nothing to deserialize") from TypeError(
                "Expected a JSON document, got None"
            )

        try:
            if isinstance(adapter, TypeAdapter):
                return adapter.validate_json(payload)
            return adapter.model_validate_json(payload)
        except ValidationError as exc:
            raise UnknownFormatException(str(exc)) from exc

    def deserialize_profile_list(self, payload: Optional[str]) -> List[Profile]:
        """Deserializes a JSON array of profiles."""
        return self._decode(_PROFILE_LIST, payload)

    def serialize_instance(self, instance: Instance) -> str:
        """
        Serializes an instance to JSON.

        :param instance: The instance to serialize.
        :return: The JSON document.
        :raises UnknownFormatException: if the instance could not be serialized.
        """
        try:
            return instance.model_dump_json(by_alias=True)
        except (ValueError, TypeError) as exc:
            raise UnknownFormatException(str(exc)) from exc

    def deserialize_instance(self, payload: Optional[str]) -> Instance:
        """
        Deserializes an instance from JSON.

        :param payload: The JSON document to parse.
        :return: The instance.
        :raises UnknownFormatException: if the format was not as expected.
        """
        return self._decode(Instance, payload)

    def deserialize_app_settings(self, payload: Union[str, Mapping[str, Any], None]) -> Settings:
        """
        Deserializes the app settings.

        Missing fields take their default values.

        :param payload: Either a JSON document or an already parsed JSON object.
        :return: The settings.
        :raises UnknownFormatException: if there was a problem parsing the settings.
        """
        if isinstance(payload, Mapping):
            try:
                return Settings.model_validate(dict(payload))
            except ValidationError as exc:
                raise UnknownFormatException(str(exc)) from exc

        return self._decode(Settings, payload)

    def serialize_app_settings(self, settings: Settings) -> Dict[str, Any]:
        """
        Serializes the app settings to a JSON object.

        :param settings: The settings to serialize.
        :return: The settings as a JSON object.
        :raises UnknownFormatException: if the settings could not be serialized.
        """
        try:
            result = settings.model_dump(mode="json", by_alias=True)
            # Guarantees the result is JSON serializable.
            json.dumps(result)
        except (ValueError, TypeError) as exc:
            raise UnknownFormatException(str(exc)) from exc

        return result

    def deserialize_organization_list(self, payload: Optional[str]) -> OrganizationList:
        """Deserializes the list of organizations of the server directory."""
        return self._decode(OrganizationList, payload)

    def deserialize_server_list(self, payload: Optional[str]) -> ServerList:
        """Deserializes the list of institute access and secure internet servers."""
        return self._decode(ServerList, payload)

    def deserialize_cookie_and_string_data(self, payload: Optional[str]) -> CookieAndStringData:
        return self._decode(CookieAndStringData, payload)

    def deserialize_cookie_and_string_array_data(
            self, payload: Optional[str]
    ) -> CookieAndStringArrayData:
        return self._decode(CookieAndStringArrayData, payload)

    def deserialize_cookie_and_profile_map_data(
            self, payload: Optional[str]
    ) -> CookieAndProfileMapData:
        return self._decode(CookieAndProfileMapData, payload)

    def deserialize_added_servers(self, payload: Optional[str]) -> AddedServers:
        return self._decode(AddedServers, payload)

    def deserialize_serialized_vpn_config(self, payload: Optional[str]) -> SerializedVpnConfig:
        return self._decode(SerializedVpnConfig, payload)

    def deserialize_current_server(self, payload: Optional[str]) -> CurrentServer:
        return self._decode(CurrentServer, payload)

    def deserialize_cert_expiry_times(self, payload: Optional[str]) -> CertExpiryTimes:
        return self._decode(CertExpiryTimes, payload)
