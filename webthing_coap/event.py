# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Events emitted by a Thing"""

import weakref

from .util import timestamp


class Event:
    """An Event represents an individual event from a thing.

    Events are created by the Thing's own logic (eg. inside an action's
    work) and handed to :meth:`.Thing.add_event`; they are never created from
    requests."""

    def __init__(self, thing, name, data=None):
        self._thing = weakref.ref(thing)
        self._name = name
        self._data = data
        self._time = timestamp()

    def __repr__(self):
        return '<%s %r at %s>' % (type(self).__name__, self._name, self._time)

    def as_event_description(self):
        description = {
            self.name: {
                'timestamp': self.time,
            },
        }

        if self.data is not None:
            description[self.name]['data'] = self.data

        return description

    @property
    def thing(self):
        return self._thing()

    @property
    def name(self):
        return self._name

    @property
    def data(self):
        return self._data

    @property
    def time(self):
        return self._time
