"""
Thread-safe access to the NetworkManager client.


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
from concurrent.futures import Future
from threading import Thread, Lock

import gi
gi.require_version("NM", "1.0")  # noqa: required before importing NM module
# pylint: disable=wrong-import-position
from gi.repository import NM, GLib

from proton.vpn.federation.exceptions import NetworkManagerError

logger = logging.getLogger(__name__)


class NMClient:
    """
    Shared NetworkManager client.

    NM.Client has to be used from the thread iterating the GLib main context
    it was created on. All instances share a single client and a daemon thread
    running that main context; asynchronous NM calls are dispatched to it and
    their outcome is returned as a ``concurrent.futures.Future``.
    """
    _lock = Lock()
    _main_context: GLib.MainContext = None
    _nm_client: NM.Client = None

    def __init__(self):
        cls = type(self)
        with cls._lock:
            if not cls._nm_client:
                cls._start()

    @classmethod
    def _start(cls):
        cls._main_context = GLib.MainContext()
        # The thread dies with the process, so the main loop is never quit.
        Thread(target=cls._iterate_main_context, daemon=True).start()

        future = cls._call_async(
            NM.Client(), "new_async", "new_finish",
            cancellable=None
        )
        cls._nm_client = future.result()
        logger.debug("NetworkManager %s client ready.", cls._nm_client.get_version())

    @classmethod
    def _iterate_main_context(cls):
        cls._main_context.push_thread_default()
        GLib.MainLoop(cls._main_context).run()

    @classmethod
    def _call_async(
            cls, source, method_name: str, finish_method_name: str, *args, **kwargs
    ) -> Future:
        """
        Calls ``source.<method_name>(*args, **kwargs, callback, user_data)`` on
        the main context thread.

        The returned future resolves with the outcome of
        ``source.<finish_method_name>``.
        """
        future = Future()
        future.set_running_or_notify_cancel()

        def on_finished(source_object, result, _user_data):
            try:
                future.set_result(cls._finish(source_object, result, finish_method_name))
            except BaseException as exc:  # pylint: disable=broad-except
                future.set_exception(exc)

        def call():
            # https://developer.gnome.org/documentation/tutorials/main-contexts.html#checking-threading
            assert cls._main_context.is_owner()
            getattr(source, method_name)(*args, **kwargs, callback=on_finished, user_data=None)

        cls._main_context.invoke_full(priority=GLib.PRIORITY_DEFAULT, function=call)
        return future

    @staticmethod
    def _finish(source_object, result, finish_method_name: str):
        # On errors the callback may get source_object/result set to None,
        # and the finish methods may return None or False.
        if not source_object or not result:
            raise NetworkManagerError(
                f"{finish_method_name} was called back without a result."
            )

        outcome = getattr(source_object, finish_method_name)(result)
        if not outcome:
            raise NetworkManagerError(f"{finish_method_name} failed.")

        return outcome

    def get_version(self) -> str:
        """Returns the version of the running NetworkManager daemon."""
        return self._nm_client.get_version()

    def add_connection_async(self, connection: NM.Connection) -> Future:
        """
        Adds the connection to NetworkManager without persisting it to disk.

        :returns: a future resolving to the NM.RemoteConnection.
        """
        return self._call_async(
            self._nm_client, "add_connection_async", "add_connection_finish",
            connection=connection, save_to_disk=False, cancellable=None
        )

    def start_connection_async(self, connection: NM.RemoteConnection) -> Future:
        """
        Activates the connection.

        :returns: a future resolving to the NM.ActiveConnection as soon as the
            activation starts, that is before the VPN tunnel is established.
        """
        return self._call_async(
            self._nm_client, "activate_connection_async", "activate_connection_finish",
            connection=connection, device=None, specific_object=None, cancellable=None
        )

    def remove_connection_async(self, connection: NM.RemoteConnection) -> Future:
        """
        Deletes the connection, deactivating it first if needed.

        :returns: a future resolving once the connection is gone.
        """
        return self._call_async(
            connection, "delete_async", "delete_finish",
            cancellable=None
        )
