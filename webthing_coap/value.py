# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""An observable, settable value"""


class Value:
    """A property value.

    This is used for communicating between the Thing representation and the
    actual physical thing implementation.

    Registered update callbacks are notified on every :meth:`set` (a
    request), and on :meth:`notify_of_external_update` (the device reporting
    a new reading) when the reading differs from the last value.
    """

    def __init__(self, initial_value, value_forwarder=None):
        """Initialize the object.

        ``value_forwarder`` is called with the new value whenever the value
        is set through :meth:`set`; it is the place to push the value to the
        hardware. It may raise to refuse the value, in which case the value
        is left as it was.
        """
        self.last_value = initial_value
        self.value_forwarder = value_forwarder
        self._update_callbacks = []

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.last_value)

    def set(self, value):
        if self.value_forwarder is not None:
            self.value_forwarder(value)

        self._update(value)

    def get(self):
        return self.last_value

    def notify_of_external_update(self, value):
        """Store a value that was already applied to the device, and notify
        update callbacks if it differs from the last one"""
        if value is not None and value != self.last_value:
            self._update(value)

    def _update(self, value):
        self.last_value = value
        for cb in list(self._update_callbacks):
            cb(value)

    def on_update(self, callback):
        self._update_callbacks.append(callback)

    def remove_update_callback(self, callback):
        self._update_callbacks.remove(callback)
