# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Tools not directly related to the Thing model or to CoAP"""

import datetime


def timestamp():
    """Current UTC time in the ISO 8601 form used in action and event
    descriptions, eg. ``2025-01-31T12:00:00+00:00``"""
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.replace(microsecond=0).isoformat()
