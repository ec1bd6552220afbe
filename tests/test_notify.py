# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

import asyncio
import json
import logging
import unittest

from webthing_coap.notify import Broadcast

from .fixtures import WithLogMonitoring, CLEANUPTIME
from .things import RecordingSink, FailingSink


class AsyncSink:
    def __init__(self, fail=False):
        self.messages = []
        self.fail = fail

    async def send(self, message):
        await asyncio.sleep(0)
        if self.fail:
            raise ConnectionResetError("Subscriber went away")
        self.messages.append(json.loads(message))


class TestBroadcast(unittest.TestCase):
    def test_membership(self):
        channel = Broadcast('test')
        sink = RecordingSink()
        self.assertEqual(len(channel), 0)

        channel.add(sink)
        channel.add(sink)
        self.assertEqual(len(channel), 1)
        self.assertIn(sink, channel)

        channel.discard(sink)
        channel.discard(sink)
        self.assertNotIn(sink, channel)

    def test_delivery(self):
        channel = Broadcast('test')
        sinks = [RecordingSink(), RecordingSink()]
        for sink in sinks:
            channel.add(sink)

        channel.send({'messageType': 'propertyStatus', 'data': {'on': True}})
        for sink in sinks:
            self.assertEqual(sink.messages, [{'messageType': 'propertyStatus', 'data': {'on': True}}])

    def test_sink_removing_itself(self):
        channel = Broadcast('test')
        late = RecordingSink()

        class OneShot(RecordingSink):
            def send(self, message):
                super().send(message)
                channel.discard(self)

        once = OneShot()
        channel.add(once)
        channel.add(late)
        channel.send({'n': 1})
        channel.send({'n': 2})

        self.assertEqual(once.messages, [{'n': 1}])
        self.assertEqual(late.messages, [{'n': 1}, {'n': 2}])


class TestFailingSinks(WithLogMonitoring):
    async def test_failing_sink_is_skipped(self):
        channel = Broadcast('test')
        sink = RecordingSink()
        channel.add(FailingSink())
        channel.add(sink)

        channel.send({'n': 1})

        self.assertEqual(sink.messages, [{'n': 1}])
        self.assertLogged(logging.ERROR, "failed")

    async def test_async_sinks(self):
        channel = Broadcast('test')
        good = AsyncSink()
        bad = AsyncSink(fail=True)
        channel.add(good)
        channel.add(bad)

        channel.send({'n': 1})
        self.assertEqual(good.messages, [], "Sending waited for an async sink")

        await asyncio.sleep(CLEANUPTIME)
        self.assertEqual(good.messages, [{'n': 1}])
        self.assertLogged(logging.WARNING, "failed")
