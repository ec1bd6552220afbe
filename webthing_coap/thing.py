# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""The Thing, a device model exposing properties, actions and events

A Thing has no knowledge of CoAP; the request handlers in
:mod:`webthing_coap.handlers` drive it exclusively through the methods
defined here. All mutations happen in the event loop's thread without
suspending, so two requests never interleave their changes to a Thing.
"""

import collections
import copy
import logging

from .constants import THING_CONTEXT
from .notify import Broadcast
from . import schema

#: Entry in a thing's catalog of available actions: the action's metadata
#: and the callable that builds an instance from ``(thing, input_)``
AvailableAction = collections.namedtuple('AvailableAction', ['metadata', 'factory'])

#: Entry in a thing's catalog of available events: the event's metadata and
#: the channel of subscribers for that event name
AvailableEvent = collections.namedtuple('AvailableEvent', ['metadata', 'subscribers'])


class Thing:
    """A Web Thing."""

    def __init__(self, id_, title, type_=(), description=''):
        """Initialize the object.

        ``id_`` is the thing's unique ID and must be a URI; ``type_`` is a
        single type string or a list of them.
        """
        if isinstance(type_, str):
            type_ = [type_]

        self.id = id_
        self.context = THING_CONTEXT
        self.type = list(type_)
        self.title = title
        self.description = description
        self.properties = {}
        self.available_actions = {}
        self.available_events = {}
        self.actions = {}
        self.events = []
        self.href_prefix = ''
        self.ui_href = None

        self.log = logging.getLogger('webthing-coap.thing')
        self.subscribers = Broadcast('%s subscribers' % self.id)
        self._href_prefix_assigned = False

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.id)

    def as_thing_description(self):
        """Return the thing state as a Thing Description.

        Everything returned is a copy; modifying it does not affect the
        thing."""
        thing = {
            'id': self.id,
            'title': self.title,
            '@context': self.context,
            '@type': list(self.type),
            'properties': self.get_property_descriptions(),
            'actions': {},
            'events': {},
            'links': [
                {
                    'rel': 'properties',
                    'href': '{}/properties'.format(self.href_prefix),
                },
                {
                    'rel': 'actions',
                    'href': '{}/actions'.format(self.href_prefix),
                },
                {
                    'rel': 'events',
                    'href': '{}/events'.format(self.href_prefix),
                },
            ],
        }

        for name, action in self.available_actions.items():
            thing['actions'][name] = copy.deepcopy(action.metadata)
            thing['actions'][name]['links'] = [
                {
                    'rel': 'action',
                    'href': '{}/actions/{}'.format(self.href_prefix, name),
                },
            ]

        for name, event in self.available_events.items():
            thing['events'][name] = copy.deepcopy(event.metadata)
            thing['events'][name]['links'] = [
                {
                    'rel': 'event',
                    'href': '{}/events/{}'.format(self.href_prefix, name),
                },
            ]

        if self.ui_href is not None:
            thing['links'].append({
                'rel': 'alternate',
                'mediaType': 'text/html',
                'href': self.ui_href,
            })

        if self.description:
            thing['description'] = self.description

        return thing

    def get_href(self):
        if self.href_prefix:
            return self.href_prefix

        return '/'

    def get_ui_href(self):
        return self.ui_href

    def set_href_prefix(self, prefix):
        """Set the prefix of any hrefs associated with this thing.

        This happens once, when the thing is registered with a server; the
        prefix is handed down to all properties and existing actions.
        Assigning a different prefix later raises a RuntimeError."""
        if self._href_prefix_assigned:
            if prefix == self.href_prefix:
                return
            raise RuntimeError("Href prefix of %r is already assigned" % self)

        self.href_prefix = prefix
        self._href_prefix_assigned = True

        for property_ in self.properties.values():
            property_.set_href_prefix(prefix)

        for action_list in self.actions.values():
            for action in action_list:
                action.set_href_prefix(prefix)

    def set_ui_href(self, href):
        self.ui_href = href

    def get_id(self):
        return self.id

    def get_title(self):
        return self.title

    def get_context(self):
        return self.context

    def get_type(self):
        return self.type

    def get_description(self):
        return self.description

    def get_property_descriptions(self):
        return {
            name: property_.as_property_description()
            for name, property_ in self.properties.items()
        }

    def get_action_descriptions(self, action_name=None):
        """Get the thing's action instances as a list of descriptions,
        optionally only those of a given name."""
        descriptions = []

        if action_name is None:
            for name in self.actions:
                for action in self.actions[name]:
                    descriptions.append(action.as_action_description())
        elif action_name in self.actions:
            for action in self.actions[action_name]:
                descriptions.append(action.as_action_description())

        return descriptions

    def get_event_descriptions(self, event_name=None):
        """Get the thing's event log as a list of descriptions, optionally
        only those of a given name."""
        if event_name is None:
            return [e.as_event_description() for e in self.events]
        else:
            return [e.as_event_description()
                    for e in self.events if e.name == event_name]

    def add_property(self, property_):
        if property_.name in self.properties:
            raise ValueError("Property %r already exists" % property_.name)

        property_.set_href_prefix(self.href_prefix)
        self.properties[property_.name] = property_

    def remove_property(self, property_):
        if self.properties.get(property_.name) is property_:
            del self.properties[property_.name]
            property_.detach()

    def find_property(self, property_name):
        return self.properties.get(property_name, None)

    def get_property(self, property_name):
        """Return a property's current value, or None if there is no such
        property"""
        prop = self.find_property(property_name)
        if prop:
            return prop.get_value()

        return None

    def get_properties(self):
        return {
            name: property_.get_value()
            for name, property_ in self.properties.items()
        }

    def has_property(self, property_name):
        return property_name in self.properties

    def set_property(self, property_name, value):
        """Set a property value.

        Unknown properties are ignored. A value the property rejects raises
        :class:`.error.PropertyError` and leaves the value unchanged."""
        prop = self.find_property(property_name)
        if not prop:
            return

        prop.set_value(value)

    def get_action(self, action_name, action_id):
        for action in self.actions.get(action_name, ()):
            if action.id == action_id:
                return action

        return None

    def add_event(self, event):
        self.events.append(event)
        self.event_notify(event)

    def add_available_event(self, name, metadata=None):
        if name in self.available_events:
            raise ValueError("Event %r already exists" % name)

        if metadata is None:
            metadata = {}

        self.available_events[name] = AvailableEvent(
                metadata,
                Broadcast('%s event %s' % (self.id, name)),
                )

    def perform_action(self, action_name, input_=None):
        """Create an action instance.

        Returns None if the action is not available or the input does not
        match the action's ``input`` schema. The returned action has not
        started yet; call its :meth:`~.Action.start` to run it."""
        if action_name not in self.available_actions:
            return None

        action_type = self.available_actions[action_name]

        if 'input' in action_type.metadata:
            if not schema.validate(action_type.metadata['input'], input_):
                self.log.debug("Rejecting input %r to %s", input_, action_name)
                return None

        action = action_type.factory(self, input_)
        action.set_href_prefix(self.href_prefix)
        self.action_notify(action)
        self.actions[action_name].append(action)
        return action

    def remove_action(self, action_name, action_id):
        """Cancel and remove an existing action.

        Returns False if there was no such action."""
        action = self.get_action(action_name, action_id)
        if action is None:
            return False

        action.cancel()
        self.actions[action_name].remove(action)
        return True

    def add_available_action(self, name, metadata, factory):
        """Add an available action.

        ``factory`` is called as ``factory(thing, input_)`` for every request
        of the action; typically it is an :class:`~.Action` subclass."""
        if name in self.available_actions:
            raise ValueError("Action %r already exists" % name)

        if metadata is None:
            metadata = {}

        self.available_actions[name] = AvailableAction(metadata, factory)
        self.actions[name] = []

    def add_subscriber(self, sink):
        """Add a sink for property and action status messages"""
        self.subscribers.add(sink)

    def remove_subscriber(self, sink):
        self.subscribers.discard(sink)

        for name in self.available_events:
            self.remove_event_subscriber(name, sink)

    def add_event_subscriber(self, name, sink):
        if name in self.available_events:
            self.available_events[name].subscribers.add(sink)

    def remove_event_subscriber(self, name, sink):
        if name in self.available_events:
            self.available_events[name].subscribers.discard(sink)

    def property_notify(self, property_):
        self.subscribers.send({
            'messageType': 'propertyStatus',
            'data': {
                property_.name: property_.get_value(),
            },
        })

    def action_notify(self, action):
        self.subscribers.send({
            'messageType': 'actionStatus',
            'data': action.as_action_description(),
        })

    def event_notify(self, event):
        if event.name not in self.available_events:
            return

        self.available_events[event.name].subscribers.send({
            'messageType': 'event',
            'data': event.as_event_description(),
        })
