# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Actions requested from a Thing, and their execution

An action goes through three states:

* ``created``: :meth:`.Thing.perform_action` validated the input and
  constructed the instance;
* ``pending``: :meth:`Action.start` scheduled its work on the event loop;
* ``completed``: the work returned and :meth:`Action.finish` ran.

Concrete actions subclass :class:`Action` and implement
:meth:`Action.perform_action` as a coroutine. Creation and execution are two
steps so that a request handler can build its response before (and
independently of) the work completing.
"""

import asyncio
import enum
import logging
import uuid
import weakref

from .util import timestamp


class ActionStatus(enum.Enum):
    CREATED = 'created'
    PENDING = 'pending'
    COMPLETED = 'completed'


class Action:
    """An Action represents an individual action on a thing."""

    def __init__(self, thing, name, input_=None, id_=None):
        """Initialize the object.

        If no ``id_`` is given, a random UUID is used; either way the ID has
        to be unique among the instances of that action name on the thing.
        """
        self.id = id_ if id_ is not None else uuid.uuid4().hex
        self._thing = weakref.ref(thing)
        self.name = name
        self.input = input_
        self.href_prefix = thing.href_prefix
        self.href = '/actions/{}/{}'.format(self.name, self.id)
        self.status = ActionStatus.CREATED
        self.time_requested = timestamp()
        self.time_completed = None

        self.log = logging.getLogger('webthing-coap.action')
        self._task = None

    def __repr__(self):
        return '<%s %s/%s (%s)>' % (type(self).__name__, self.name, self.id, self.status.value)

    def as_action_description(self):
        description = {
            self.name: {
                'href': self.href_prefix + self.href,
                'timeRequested': self.time_requested,
                'status': self.status.value,
            },
        }

        if self.input is not None:
            description[self.name]['input'] = self.input

        if self.time_completed is not None:
            description[self.name]['timeCompleted'] = self.time_completed

        return description

    def set_href_prefix(self, prefix):
        self.href_prefix = prefix

    @property
    def thing(self):
        return self._thing()

    def get_id(self):
        return self.id

    def get_name(self):
        return self.name

    def get_href(self):
        return self.href_prefix + self.href

    def get_status(self):
        return self.status

    def get_input(self):
        return self.input

    def start(self):
        """Mark the action as pending and schedule its work.

        Must be called from within a running event loop."""
        self.status = ActionStatus.PENDING
        self._notify()
        self._task = asyncio.get_running_loop().create_task(
                self._run(),
                name="Action %s/%s" % (self.name, self.id),
                )

    async def _run(self):
        try:
            await self.perform_action()
        except asyncio.CancelledError:
            self.log.debug("Action %r was cancelled", self)
            raise
        except Exception:
            # The action stays pending; there is no failed state to report
            self.log.exception("Action %r failed", self)
            return

        self.finish()

    async def perform_action(self):
        """Override this with the action's work.

        This may suspend (eg. ``await asyncio.sleep(...)``) and mutate the
        thing afterwards. If the action is cancelled while suspended, the
        coroutine is interrupted at that point and never resumes."""

    def cancel(self):
        """Stop the action's outstanding work, if any.

        Completed actions are left alone."""
        if self.status == ActionStatus.COMPLETED:
            return

        if self._task is not None and not self._task.done():
            self._task.cancel()

        self.cancel_action()

    def cancel_action(self):
        """Override this to release device-side resources on cancellation."""

    def finish(self):
        self.status = ActionStatus.COMPLETED
        self.time_completed = timestamp()
        self._notify()

    def _notify(self):
        thing = self.thing
        if thing is not None:
            thing.action_notify(self)
