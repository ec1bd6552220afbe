# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Properties of a Thing"""

import copy
import weakref

from .error import PropertyError
from . import schema


class Property:
    """A Property represents an individual state value of a thing.

    The metadata is a JSON-schema-like dictionary (``type``, ``minimum``,
    ``enum``, ...) enriched with Web Thing annotations such as ``@type``,
    ``title``, ``unit`` and ``readOnly``. It is used both to check values set
    through the API and to render the property's description.
    """

    def __init__(self, thing, name, value, metadata=None):
        self._thing = weakref.ref(thing)
        self.name = name
        self.value = value
        self.href_prefix = ''
        self.href = '/properties/{}'.format(self.name)
        self.metadata = metadata if metadata is not None else {}

        # Changes that bypass set_value (sensor readings) get reported too
        self.value.on_update(self._value_updated)

    def __repr__(self):
        return '<%s %r of %r>' % (type(self).__name__, self.name, self.get_thing())

    def _value_updated(self, value):
        self._notify()

    def detach(self):
        """Stop reporting changes of the value to the thing"""
        self.value.remove_update_callback(self._value_updated)

    def _notify(self):
        thing = self.get_thing()
        if thing is not None:
            thing.property_notify(self)

    def validate_value(self, value):
        """Raise a :class:`PropertyError` if *value* may not be set"""
        if self.metadata.get('readOnly', False):
            raise PropertyError('Read-only property')

        if not schema.validate(self.metadata, value):
            raise PropertyError('Invalid property value')

    def as_property_description(self):
        description = copy.deepcopy(self.metadata)
        description['value'] = self.get_value()
        description.setdefault('links', []).append({
            'rel': 'property',
            'href': self.href_prefix + self.href,
        })
        return description

    def set_href_prefix(self, prefix):
        self.href_prefix = prefix

    def get_href(self):
        return self.href_prefix + self.href

    def get_value(self):
        return self.value.get()

    def set_value(self, value):
        """Validate and set *value*.

        A value refused by the value forwarder (the device) is reported as a
        :class:`PropertyError` as well; the value is then left unchanged."""
        self.validate_value(value)
        try:
            self.value.set(value)
        except Exception as e:
            raise PropertyError('Value refused by the device') from e

    def get_name(self):
        return self.name

    def get_thing(self):
        return self._thing()

    def get_metadata(self):
        return self.metadata
