# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Dispatch of requests to resources by path templates

The aiocoap :class:`aiocoap.resource.Site` dispatches on fixed paths. The
Web Thing API needs variable segments (``/:thingId/properties/:propertyName``),
so the :class:`Router` matches the request's Uri-Path against a list of
templates instead, and hands the values captured by the placeholders to the
resource as the ``route_params`` attribute of the (copied) request.

For example,

>>> from aiocoap.resource import Resource
>>> router = Router()
>>> router.add_route('/:thingId/properties/:propertyName', Resource())

has requests to </0/properties/on> rendered by the new resource, which sees
``request.route_params == {'thingId': '0', 'propertyName': 'on'}``.
"""

import logging

from aiocoap import error
from aiocoap import interfaces
from aiocoap.pipe import Pipe
from aiocoap.resource import PathCapable


class Route:
    """A path template and the resource serving it.

    Templates are absolute paths whose segments are either literals or named
    placeholders introduced by a colon. A placeholder matches exactly one
    non-empty segment."""

    def __init__(self, template, resource):
        if not template.startswith('/'):
            raise ValueError("Route templates must start with a slash")
        self.template = template
        self.segments = tuple(s for s in template.split('/') if s)
        self.resource = resource

    def __repr__(self):
        return '<%s %s -> %r>' % (type(self).__name__, self.template, self.resource)

    def match(self, path):
        """Return the captured parameters if *path* (a tuple of segments)
        matches this route, otherwise None"""
        if len(path) != len(self.segments):
            return None

        params = {}
        for segment, value in zip(self.segments, path):
            if segment.startswith(':'):
                if not value:
                    return None
                params[segment[1:]] = value
            elif segment != value:
                return None
        return params


class Router(interfaces.ObservableResource, PathCapable):
    """Root resource of a server that routes requests by path template.

    Routes are tried in the order they were added; the first match wins.
    Requests to a path no route matches are answered with 4.04 Not Found.
    A single trailing slash is ignored, so </properties/> is served like
    </properties>."""

    def __init__(self, log=None):
        self._routes = []
        self.log = log or logging.getLogger('webthing-coap.router')

    def add_route(self, template, resource):
        self._routes.append(Route(template, resource))

    def get_routes(self):
        return list(self._routes)

    def _find_route_and_annotated_message(self, request):
        """Given a request, find the resource that will handle it. Returns
        that resource and a copy of the request that carries the route's
        parameters in its ``route_params`` attribute, or raises a
        KeyError."""
        path = tuple(request.opt.uri_path)
        if path and path[-1] == '':
            path = path[:-1]

        for route in self._routes:
            params = route.match(path)
            if params is not None:
                self.log.debug("Routing %s /%s to %s", request.code, "/".join(path), route.template)
                annotated = request.copy()
                annotated.route_params = params
                return route.resource, annotated

        self.log.debug("No route for /%s", "/".join(path))
        raise KeyError()

    async def needs_blockwise_assembly(self, request):
        try:
            child, subrequest = self._find_route_and_annotated_message(request)
        except KeyError:
            return True
        else:
            return await child.needs_blockwise_assembly(subrequest)

    async def render(self, request):
        try:
            child, subrequest = self._find_route_and_annotated_message(request)
        except KeyError:
            raise error.NotFound()
        else:
            return await child.render(subrequest)

    async def add_observation(self, request, serverobservation):
        try:
            child, subrequest = self._find_route_and_annotated_message(request)
        except KeyError:
            return

        if isinstance(child, interfaces.ObservableResource):
            await child.add_observation(subrequest, serverobservation)

    async def render_to_pipe(self, request: Pipe):
        try:
            child, subrequest = self._find_route_and_annotated_message(request.request)
        except KeyError:
            raise error.NotFound()
        else:
            request.request = subrequest
            return await child.render_to_pipe(request)
