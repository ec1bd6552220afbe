# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Constants either defined by the Web Thing API or chosen as defaults for
the server"""

from aiocoap.numbers import COAP_PORT, ContentFormat

#: Port the server listens on unless told otherwise
DEFAULT_PORT = COAP_PORT

#: Scheme used when rendering the ``base`` of a Thing Description
DEFAULT_SCHEME = "coap"

#: The ``@context`` every Thing Description carries
THING_CONTEXT = "https://webthings.io/schemas"

#: DNS-SD service type under which the server is advertised
SERVICE_TYPE = "_webthing._udp.local."

#: Seconds to wait before retrying a failed advertisement
ADVERTISE_RETRY_DELAY = 10

#: Content format of all JSON bodies, also advertised as ``ct`` in discovery
JSON_CT = ContentFormat.JSON

#: Content format of the discovery document
LINKFORMAT_CT = ContentFormat.LINKFORMAT
