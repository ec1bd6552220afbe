# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Server to represent Web Things over CoAP

:class:`WebThingServer` wires a registry of things to an aiocoap server
context. A server for a :class:`~.registry.SingleThing` serves it at the base
path:

====================================  =================================
``/``                                 Thing Description
``/.well-known/core``                 discovery document (link-format)
``/properties``                       all property values
``/properties/<name>``                one property value (GET, PUT)
``/actions``                          action instances (GET, POST)
``/actions/<name>``                   instances of one action (GET, POST)
``/actions/<name>/<id>``              one instance (GET, PUT, DELETE)
``/events``                           event log
``/events/<name>``                    event log of one event
====================================  =================================

A server for :class:`~.registry.MultipleThings` lists all descriptions at
the base path, and serves each thing's resources under
``/<index>/...``; the discovery document stays at ``/.well-known/core`` and
lists the resources of all things.
"""

import asyncio
import logging

import aiocoap

from .advertise import Advertisement
from .constants import DEFAULT_PORT
from .handlers import (
        ThingsResource, ThingResource, CoresResource, CoreResource,
        PropertiesResource, PropertyResource, ActionsResource, ActionResource,
        ActionIDResource, EventsResource, EventResource,
        )
from .registry import MultipleThings
from .router import Router


class WebThingServer:
    """Server to represent a Web Thing over CoAP."""

    def __init__(self, things, port=DEFAULT_PORT, hostname=None,
            additional_routes=None, base_path='/', *, bind=None,
            advertise=True):
        """Initialize the server.

        ``things`` is a :class:`~.registry.SingleThing` or
        :class:`~.registry.MultipleThings`. ``hostname`` is the name the
        server is reachable under, which is used in descriptions when a
        request does not say which host it was addressed to.
        ``additional_routes`` is a list of ``(template, resource)`` pairs
        that are routed before the Web Thing API; ``base_path`` is prepended
        to all Web Thing API paths. ``bind`` is the address to listen on
        (all addresses by default).

        With ``advertise`` set to False, the server is not announced via
        DNS-SD.
        """
        self.things = things
        self.name = things.get_name()
        self.port = port
        self.hostname = hostname
        self.bind = bind
        self.base_path = base_path[:-1] if base_path.endswith('/') else base_path

        self.log = logging.getLogger('webthing-coap.server')

        if isinstance(self.things, MultipleThings):
            for idx, thing in enumerate(self.things.get_things()):
                thing.set_href_prefix('{}/{}'.format(self.base_path, idx))
        else:
            self.things.get_thing().set_href_prefix(self.base_path)

        default_host = (hostname or 'localhost').lower()
        if port != DEFAULT_PORT:
            default_host = '{}:{}'.format(default_host, port)

        self.router = Router()

        for template, resource in additional_routes or ():
            self.router.add_route(template, resource)

        def handler(cls):
            return cls(self.things, default_host=default_host)

        if isinstance(self.things, MultipleThings):
            self.router.add_route(self.base_path or '/', handler(ThingsResource))
            self.router.add_route('/.well-known/core', handler(CoresResource))
            prefix = self.base_path + '/:thingId'
            self.router.add_route(prefix, handler(ThingResource))
        else:
            self.router.add_route(self.base_path or '/', handler(ThingResource))
            self.router.add_route('/.well-known/core', handler(CoreResource))
            prefix = self.base_path

        self.router.add_route(prefix + '/properties', handler(PropertiesResource))
        self.router.add_route(prefix + '/properties/:propertyName', handler(PropertyResource))
        self.router.add_route(prefix + '/actions', handler(ActionsResource))
        self.router.add_route(prefix + '/actions/:actionName', handler(ActionResource))
        self.router.add_route(prefix + '/actions/:actionName/:actionId', handler(ActionIDResource))
        self.router.add_route(prefix + '/events', handler(EventsResource))
        self.router.add_route(prefix + '/events/:eventName', handler(EventResource))

        if advertise:
            self.advertisement = Advertisement(self.name, self.port)
        else:
            self.advertisement = None

        self.context = None

    def __repr__(self):
        return '<%s %r on port %d>' % (type(self).__name__, self.name, self.port)

    async def start(self):
        """Start listening for incoming requests, and start announcing the
        server"""
        self.context = await aiocoap.Context.create_server_context(
                self.router,
                bind=(self.bind, self.port),
                )
        self.log.info("Serving %r on port %d", self.name, self.port)

        if self.advertisement is not None:
            self.advertisement.start()

    async def stop(self, force=False):
        """Stop announcing the server and stop listening.

        Returns once both have completed, even if one of them fails; the
        first failure is raised after that. ``force`` skips the goodbye
        announcement."""
        stopping = []

        if self.advertisement is not None:
            stopping.append(self.advertisement.stop(force))

        if self.context is not None:
            stopping.append(self.context.shutdown())
            self.context = None

        results = await asyncio.gather(*stopping, return_exceptions=True)
        errors = [r for r in results if isinstance(r, BaseException)]
        for e in errors:
            self.log.error("Error while stopping %r: %r", self.name, e)
        if errors:
            raise errors[0]

        self.log.info("Stopped serving %r", self.name)
