# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Test fixtures that are not test specific"""

import logging
import unittest

# time granted to asyncio to deliver datagrams sent via loopback and to run
# the tasks they trigger
CLEANUPTIME = 0.05


class WithLogMonitoring(unittest.IsolatedAsyncioTestCase):
    """Test case that collects all log records emitted during a test into
    ``self.handler.list``"""

    async def asyncSetUp(self):
        self.handler = self.ListHandler()

        self._original_level = logging.root.level
        logging.root.setLevel(0)
        logging.root.addHandler(self.handler)

        await super().asyncSetUp()

    async def asyncTearDown(self):
        await super().asyncTearDown()

        logging.root.removeHandler(self.handler)
        logging.root.setLevel(self._original_level)

    class ListHandler(logging.Handler):
        """Handler that catches log records into a list for later evaluation

        The messages are formatted right away and the arguments dropped, so
        the records don't keep the objects they mention alive."""

        def __init__(self):
            super().__init__()
            self.list = []

        def emit(self, record):
            record.msg = record.getMessage()
            record.args = None
            record.exc_info = None
            self.list.append(record)

        def __iter__(self):
            return self.list.__iter__()

    def assertLogged(self, level, fragment):
        """Assert that a record of at least the given level containing the
        given fragment was logged"""
        for entry in self.handler.list:
            if entry.levelno >= level and fragment in entry.msg:
                return
        raise AssertionError("Nothing logged containing %r; log was:\n%s" % (
            fragment, "\n".join(e.msg for e in self.handler.list)))

    def assertNotLogged(self, level):
        messages = [e.msg for e in self.handler.list
                    if e.levelno >= level and e.name != "asyncio"]
        self.assertEqual(messages, [], "Unexpected log messages")
