# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""
The webthing_coap package implements the Web Thing API over CoAP, the
`Constrained Application Protocol`_, using aiocoap as transport.

.. _`Constrained Application Protocol`: http://coap.technology/

Module contents
---------------

This root module re-exports the classes needed to model things and serve
them: :class:`.Thing`, :class:`.Property`, :class:`.Value`,
:class:`.Action`, :class:`.Event`, the registries :class:`.SingleThing`
and :class:`.MultipleThings`, and :class:`.WebThingServer`.
"""

from .action import Action, ActionStatus
from .event import Event
from .property import Property
from .registry import SingleThing, MultipleThings
from .server import WebThingServer
from .thing import Thing
from .value import Value

__all__ = ['Action', 'ActionStatus', 'Event', 'Property', 'SingleThing',
           'MultipleThings', 'WebThingServer', 'Thing', 'Value']
