# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Resources implementing the Web Thing API on top of the Thing model

Each class serves one kind of resource for all things of a server; the
thing a request is for is picked from the ``thingId`` route parameter (see
:mod:`webthing_coap.router`), and every handler first resolves that thing and
answers 4.04 Not Found if there is none.

Errors are raised as :mod:`aiocoap.error` exceptions, which aiocoap renders
into responses without payload: ``NotFound`` for unknown things, properties
and action instances, ``BadRequest`` for unusable payloads and rejected
property values. A rejected request never changes the model.

The resources for properties, single action instances and events are
observable (RFC 7641): an observation registers a subscriber on the thing and
triggers a notification whenever the observed state changes.
"""

import json

import aiocoap
from aiocoap import error
from aiocoap.numbers import codes
from aiocoap.resource import Resource, ObservableResource

from .constants import DEFAULT_SCHEME, JSON_CT, LINKFORMAT_CT
from .description import get_description, get_discovery_document
from .error import PropertyError


def json_message(payload, code=None):
    """Build a response carrying *payload* as JSON"""
    return aiocoap.Message(
            code=code,
            payload=json.dumps(payload).encode('utf8'),
            content_format=JSON_CT,
            )


def get_body(request):
    """Parse the request payload, which has to be a JSON object"""
    try:
        body = json.loads(request.payload.decode('utf8'))
    except ValueError:
        raise error.BadRequest()

    if not isinstance(body, dict):
        raise error.BadRequest()

    return body


def get_input(entry):
    """Extract the ``input`` member of an action request entry, if any"""
    if isinstance(entry, dict):
        return entry.get('input', None)
    return None


class _ObservationSink:
    """Subscriber that turns matching thing messages into notifications of
    a CoAP observation"""

    def __init__(self, serverobservation, accepts):
        self.serverobservation = serverobservation
        self.accepts = accepts

    def __repr__(self):
        return '<%s for %r>' % (type(self).__name__, self.serverobservation)

    def send(self, message):
        if self.accepts(json.loads(message)):
            self.serverobservation.trigger()


class BaseResource(Resource):
    """Base class for the resources of a server, which is initialized with
    the server's things."""

    def __init__(self, things, default_host='localhost', scheme=DEFAULT_SCHEME):
        super().__init__()
        self.things = things
        self.default_host = default_host
        self.scheme = scheme

    def get_thing(self, request):
        """Get the thing this request is for, or raise NotFound"""
        params = getattr(request, 'route_params', {})
        thing = self.things.get_thing(params.get('thingId'))
        if thing is None:
            raise error.NotFound()
        return thing

    def get_host(self, request):
        """Host (and port) the request was addressed to, as used in the
        ``base`` of descriptions"""
        if request.opt.uri_host is not None:
            if request.opt.uri_port is not None:
                return '%s:%d' % (request.opt.uri_host, request.opt.uri_port)
            return request.opt.uri_host
        if request.remote is not None:
            return request.remote.hostinfo_local
        return self.default_host

    def describe(self, request, thing):
        return get_description(thing, self.get_host(request), self.scheme)


class ObservableThingResource(BaseResource, ObservableResource):
    """Base class for resources whose observations are fed from a thing's
    subscriber channels.

    Subclasses name the channels to join in :meth:`observed_channels` and
    may filter the messages arriving there in :meth:`is_relevant`."""

    async def add_observation(self, request, serverobservation):
        try:
            thing = self.get_thing(request)
        except error.NotFound:
            return

        channels = self.observed_channels(thing, request)
        if not channels:
            return

        sink = _ObservationSink(
                serverobservation,
                lambda message, thing=thing, request=request: self.is_relevant(thing, request, message),
                )
        for channel in channels:
            channel.add(sink)

        def _cancel(channels=channels, sink=sink):
            for channel in channels:
                channel.discard(sink)

        serverobservation.accept(_cancel)

    def observed_channels(self, thing, request):
        """Return the :class:`~webthing_coap.notify.Broadcast` objects whose
        messages can change this resource's representation"""
        return [thing.subscribers]

    def is_relevant(self, thing, request, message):
        return True


class ThingsResource(BaseResource):
    """Handle a request to / when the server manages multiple things."""

    async def render_get(self, request):
        return json_message([
            self.describe(request, thing)
            for thing in self.things.get_things()
        ])


class ThingResource(BaseResource):
    """Handle a request to the root of a single thing."""

    async def render_get(self, request):
        thing = self.get_thing(request)
        return json_message(self.describe(request, thing))


class CoresResource(BaseResource):
    """Handle a request to /.well-known/core when the server manages multiple
    things."""

    async def render_get(self, request):
        descriptions = [
            self.describe(request, thing)
            for thing in self.things.get_things()
        ]
        return aiocoap.Message(
                payload=get_discovery_document(descriptions).encode('utf8'),
                content_format=LINKFORMAT_CT,
                )


class CoreResource(BaseResource):
    """Handle a request to /.well-known/core."""

    async def render_get(self, request):
        thing = self.get_thing(request)
        document = get_discovery_document([self.describe(request, thing)])
        return aiocoap.Message(
                payload=document.encode('utf8'),
                content_format=LINKFORMAT_CT,
                )


class PropertiesResource(ObservableThingResource):
    """Handle a request to /properties."""

    async def render_get(self, request):
        thing = self.get_thing(request)
        return json_message(thing.get_properties())

    def is_relevant(self, thing, request, message):
        return message['messageType'] == 'propertyStatus'


class PropertyResource(ObservableThingResource):
    """Handle a request to /properties/<property>."""

    async def render_get(self, request):
        thing = self.get_thing(request)
        property_name = request.route_params['propertyName']
        if not thing.has_property(property_name):
            raise error.NotFound()

        return json_message({property_name: thing.get_property(property_name)})

    async def render_put(self, request):
        thing = self.get_thing(request)
        property_name = request.route_params['propertyName']
        body = get_body(request)
        if property_name not in body:
            raise error.BadRequest()

        if not thing.has_property(property_name):
            raise error.NotFound()

        try:
            thing.set_property(property_name, body[property_name])
        except PropertyError:
            raise error.BadRequest()

        return json_message(
                {property_name: thing.get_property(property_name)},
                code=codes.CHANGED,
                )

    def observed_channels(self, thing, request):
        if not thing.has_property(request.route_params['propertyName']):
            return []
        return [thing.subscribers]

    def is_relevant(self, thing, request, message):
        return message['messageType'] == 'propertyStatus' and \
                request.route_params['propertyName'] in message['data']


class ActionsResource(BaseResource):
    """Handle a request to /actions."""

    async def render_get(self, request):
        thing = self.get_thing(request)
        return json_message(thing.get_action_descriptions())

    async def render_post(self, request):
        thing = self.get_thing(request)
        body = get_body(request)

        return json_message(
                self.perform_actions(thing, body.items()),
                code=codes.CREATED,
                )

    def perform_actions(self, thing, entries):
        """Create and start an action for each (name, request) entry,
        skipping those the thing does not accept, and return the merged
        descriptions of the started actions"""
        response = {}
        for action_name, entry in entries:
            action = thing.perform_action(action_name, get_input(entry))
            if action is not None:
                response.update(action.as_action_description())
                action.start()
        return response


class ActionResource(ActionsResource):
    """Handle a request to /actions/<action_name>."""

    async def render_get(self, request):
        thing = self.get_thing(request)
        action_name = request.route_params['actionName']
        return json_message(thing.get_action_descriptions(action_name))

    async def render_post(self, request):
        thing = self.get_thing(request)
        action_name = request.route_params['actionName']
        body = get_body(request)

        entries = [(name, entry) for name, entry in body.items()
                   if name == action_name]
        return json_message(
                self.perform_actions(thing, entries),
                code=codes.CREATED,
                )


class ActionIDResource(ObservableThingResource):
    """Handle a request to /actions/<action_name>/<action_id>."""

    def _get_action(self, thing, request):
        action = thing.get_action(
                request.route_params['actionName'],
                request.route_params['actionId'],
                )
        if action is None:
            raise error.NotFound()
        return action

    async def render_get(self, request):
        thing = self.get_thing(request)
        action = self._get_action(thing, request)
        return json_message(action.as_action_description())

    async def render_put(self, request):
        self.get_thing(request)

        # Updating an action instance is accepted but has no effect yet
        return aiocoap.Message(code=codes.CHANGED)

    async def render_delete(self, request):
        thing = self.get_thing(request)

        if not thing.remove_action(
                request.route_params['actionName'],
                request.route_params['actionId'],
                ):
            raise error.NotFound()

        return aiocoap.Message(code=codes.DELETED)

    def observed_channels(self, thing, request):
        if thing.get_action(request.route_params['actionName'],
                            request.route_params['actionId']) is None:
            return []
        return [thing.subscribers]

    def is_relevant(self, thing, request, message):
        if message['messageType'] != 'actionStatus':
            return False
        description = message['data'].get(request.route_params['actionName'])
        return description is not None and description['href'].endswith(
                '/' + request.route_params['actionId'])


class EventsResource(ObservableThingResource):
    """Handle a request to /events."""

    async def render_get(self, request):
        thing = self.get_thing(request)
        return json_message(thing.get_event_descriptions())

    def observed_channels(self, thing, request):
        return [event.subscribers for event in thing.available_events.values()]


class EventResource(ObservableThingResource):
    """Handle a request to /events/<event_name>."""

    async def render_get(self, request):
        thing = self.get_thing(request)
        event_name = request.route_params['eventName']
        return json_message(thing.get_event_descriptions(event_name))

    def observed_channels(self, thing, request):
        event = thing.available_events.get(request.route_params['eventName'])
        if event is None:
            return []
        return [event.subscribers]
