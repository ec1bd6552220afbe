# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""DNS-SD advertisement of a server on the local network

The server is announced as a ``_webthing._udp`` service through the
``zeroconf`` library. Announcing happens in the background: a failure is
logged and retried after :data:`~webthing_coap.constants.ADVERTISE_RETRY_DELAY`
seconds, and request handling never waits for it.
"""

import asyncio
import logging
import socket

from zeroconf import ServiceInfo
from zeroconf.asyncio import AsyncZeroconf

from .constants import ADVERTISE_RETRY_DELAY, SERVICE_TYPE


def _get_hostname():
    return socket.gethostname().split('.')[0].lower()


class Advertisement:
    """Announcement of a single service instance.

    :meth:`start` returns immediately; :meth:`stop` ends any pending retry
    loop and withdraws the announcement."""

    def __init__(self, name, port, *, path='/', retry_delay=ADVERTISE_RETRY_DELAY, log=None):
        self.name = name
        self.port = port
        self.path = path
        self.retry_delay = retry_delay
        self.log = log or logging.getLogger('webthing-coap.advertise')

        self._task = None
        self._zeroconf = None
        self._service_info = None

    def __repr__(self):
        return '<%s %r on port %d%s>' % (
                type(self).__name__,
                self.name,
                self.port,
                " (announced)" if self.is_announced else "",
                )

    @property
    def is_announced(self):
        """``True`` if the DNS-SD service is currently registered."""
        return self._service_info is not None

    def start(self):
        """Begin announcing in a background task of the running loop"""
        if self._task is not None:
            return

        self._task = asyncio.get_running_loop().create_task(
                self._announce_until_success(),
                name="Advertisement of %r" % self.name,
                )

    async def _announce_until_success(self):
        while True:
            try:
                await self._announce()
            except Exception as e:
                self.log.debug("mDNS error: %s", e)
                await self._close()
                await asyncio.sleep(self.retry_delay)
            else:
                return

    async def _announce(self):
        hostname = _get_hostname()

        # Zeroconf requires the fully-qualified service type
        # (``_webthing._udp.local.``) in the instance name.
        service_info = ServiceInfo(
            type_=SERVICE_TYPE,
            name="%s.%s" % (self.name, SERVICE_TYPE),
            port=self.port,
            properties={
                "path": self.path,
            },
            server="%s.local." % hostname,
        )

        self._zeroconf = AsyncZeroconf()
        await self._zeroconf.async_register_service(service_info)
        self._service_info = service_info
        self.log.info("Announced %r on port %d", self.name, self.port)

    async def _close(self):
        if self._zeroconf is None:
            return

        await self._zeroconf.async_close()
        self._zeroconf = None
        self._service_info = None

    async def stop(self, force=False):
        """Withdraw the announcement.

        With ``force``, the goodbye packets are not sent and the responder is
        just closed."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._service_info is not None and not force:
            await self._zeroconf.async_unregister_service(self._service_info)
            self.log.info("Withdrew announcement of %r", self.name)

        await self._close()
