# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Containers for the things a server serves

A server serves either exactly one thing (:class:`SingleThing`, addressed at
the server's root) or a list of them (:class:`MultipleThings`, addressed by
their index as the first path segment)."""


class SingleThing:
    """A container for a single thing."""

    def __init__(self, thing):
        self.thing = thing

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.thing)

    def get_thing(self, idx=None):
        """Return the thing; the index is ignored as there is only one."""
        return self.thing

    def get_things(self):
        return [self.thing]

    def get_name(self):
        return self.thing.title


class MultipleThings:
    """A container for multiple things."""

    def __init__(self, things, name):
        self.things = list(things)
        self.name = name

    def __repr__(self):
        return '<%s %r with %d thing(s)>' % (type(self).__name__, self.name, len(self.things))

    def get_thing(self, idx):
        """Get the thing at the given index, which may be given as a string.

        An index that is not a number (or out of range) is looked up as a
        thing ID instead. Returns None if neither matches."""
        try:
            idx = int(idx)
        except (TypeError, ValueError):
            for thing in self.things:
                if thing.id == idx:
                    return thing
            return None

        if idx < 0 or idx >= len(self.things):
            return None

        return self.things[idx]

    def get_things(self):
        return self.things

    def get_name(self):
        return self.name
