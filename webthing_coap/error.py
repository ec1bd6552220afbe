# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""
Errors raised by the Thing model

Request handlers do not let these escape; they translate them into the
renderable errors of :mod:`aiocoap.error` (``NotFound``, ``BadRequest``),
which aiocoap turns into empty responses with the respective code.
"""


class Error(Exception):
    """
    Base exception for all exceptions raised by the Thing model
    """


class PropertyError(Error):
    """
    A property value was rejected, either because the property is read-only
    or because the value does not satisfy the property's metadata
    """
