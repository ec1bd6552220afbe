# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Fan-out of Thing notifications to subscribers

A subscriber ("sink") is any object with a ``send(message)`` method that
accepts a serialized JSON message. Each :class:`~webthing_coap.thing.Thing`
keeps one :class:`Broadcast` for property and action status messages and one
per available event.

Delivery is best-effort: a sink that raises is logged and skipped, and a sink
whose ``send`` returns an awaitable gets it scheduled on the running loop
instead of being waited for, so neither a failing nor a slow sink can hold up
the others or the request that caused the notification.
"""

import asyncio
import inspect
import json
import logging


class Broadcast:
    """A set of sinks that all receive every message sent through it"""

    def __init__(self, name, log=None):
        self.name = name
        self.log = log or logging.getLogger('webthing-coap.notify')
        self._sinks = set()
        self._pending = set()

    def __repr__(self):
        return '<%s %r with %d sink(s)>' % (type(self).__name__, self.name, len(self._sinks))

    def __len__(self):
        return len(self._sinks)

    def __contains__(self, sink):
        return sink in self._sinks

    def add(self, sink):
        self._sinks.add(sink)

    def discard(self, sink):
        self._sinks.discard(sink)

    def send(self, message):
        """Serialize *message* and hand it to every sink"""
        if not self._sinks:
            return

        serialized = json.dumps(message)

        for sink in list(self._sinks):
            try:
                result = sink.send(serialized)
            except Exception:
                self.log.exception("Sending to %r on %s failed", sink, self.name)
                continue

            if inspect.isawaitable(result):
                self._schedule(sink, result)

    def _schedule(self, sink, awaitable):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop to deliver on; drop the message for this sink
            self.log.warning("Dropping message to %r on %s: no running loop", sink, self.name)
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return

        task = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(task)

        def _done(task, sink=sink):
            self._pending.discard(task)
            if task.cancelled():
                return
            if task.exception() is not None:
                self.log.warning("Sending to %r on %s failed: %r", sink, self.name, task.exception())

        task.add_done_callback(_done)
