# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Things used throughout the tests"""

import asyncio
import json

from webthing_coap import Action, Event, Property, Thing, Value


class OverheatedEvent(Event):
    def __init__(self, thing, data):
        super().__init__(thing, 'overheated', data)


class FadeAction(Action):
    def __init__(self, thing, input_):
        super().__init__(thing, 'fade', input_)

    async def perform_action(self):
        await asyncio.sleep(self.input['duration'] / 1000)
        self.thing.set_property('brightness', self.input['brightness'])
        self.thing.add_event(OverheatedEvent(self.thing, 102))


class CountedToggleAction(Action):
    count = 0

    def __init__(self, thing, input_):
        type(self).count += 1
        super().__init__(thing, 'toggle', input_, id_=str(type(self).count))

    async def perform_action(self):
        self.thing.set_property('on', not self.thing.get_property('on'))


class Lamp(Thing):
    """A dimmable light that records the values pushed to the hardware"""

    def __init__(self, id_='urn:dev:ops:my-lamp-1234'):
        super().__init__(
            id_,
            'My Lamp',
            ['OnOffSwitch', 'Light'],
            'A web connected lamp'
        )

        self.forwarded = []

        self.add_property(
            Property(
                self,
                'on',
                Value(True, lambda v: self.forwarded.append(('on', v))),
                metadata={
                    '@type': 'OnOffProperty',
                    'title': 'On/Off',
                    'type': 'boolean',
                    'description': 'Whether the lamp is turned on',
                }))

        self.add_property(
            Property(
                self,
                'brightness',
                Value(50, lambda v: self.forwarded.append(('brightness', v))),
                metadata={
                    '@type': 'BrightnessProperty',
                    'title': 'Brightness',
                    'type': 'integer',
                    'description': 'The level of light from 0-100',
                    'minimum': 0,
                    'maximum': 100,
                    'unit': 'percent',
                }))

        self.add_available_action(
            'fade',
            {
                'title': 'Fade',
                'description': 'Fade the lamp to a given level',
                'input': {
                    'type': 'object',
                    'required': [
                        'brightness',
                        'duration',
                    ],
                    'properties': {
                        'brightness': {
                            'type': 'integer',
                            'minimum': 0,
                            'maximum': 100,
                            'unit': 'percent',
                        },
                        'duration': {
                            'type': 'integer',
                            'minimum': 1,
                            'unit': 'milliseconds',
                        },
                    },
                },
            },
            FadeAction)

        self.add_available_action(
            'toggle',
            {
                'title': 'Toggle',
                'description': 'Switch the lamp on or off',
            },
            CountedToggleAction)

        self.add_available_event(
            'overheated',
            {
                'description':
                'The lamp has exceeded its safe operating temperature',
                'type': 'number',
                'unit': 'degree celsius',
            })


class HumiditySensor(Thing):
    """A humidity sensor whose level is only updated by the device"""

    def __init__(self):
        super().__init__(
            'urn:dev:ops:my-humidity-sensor-1234',
            'My Humidity Sensor',
            'MultiLevelSensor',
        )

        self.level = Value(43.0)
        self.add_property(
            Property(
                self,
                'level',
                self.level,
                metadata={
                    '@type': 'LevelProperty',
                    'title': 'Humidity',
                    'type': 'number',
                    'description': 'The current humidity in %',
                    'minimum': 0,
                    'maximum': 100,
                    'unit': 'percent',
                    'readOnly': True,
                }))


class RecordingSink:
    """Subscriber that keeps all messages it was sent, decoded"""

    def __init__(self):
        self.messages = []

    def send(self, message):
        self.messages.append(json.loads(message))

    def of_type(self, message_type):
        return [m['data'] for m in self.messages if m['messageType'] == message_type]


class FailingSink:
    def send(self, message):
        raise ConnectionResetError("Subscriber went away")
