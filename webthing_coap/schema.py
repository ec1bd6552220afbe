# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Thin boolean front-end to :mod:`jsonschema`

Thing metadata mixes JSON Schema keywords with Web Thing annotations
(``@type``, ``title``, ``unit``, ``readOnly``, ``links``); validators ignore
unknown keywords, so the metadata can be used as a schema as it is.
"""

import jsonschema


def validate(schema, instance):
    """Return True if *instance* satisfies *schema*.

    >>> validate({"type": "integer", "minimum": 0}, 5)
    True
    >>> validate({"type": "integer", "minimum": 0}, -1)
    False
    """
    try:
        jsonschema.validate(instance, schema)
    except jsonschema.ValidationError:
        return False
    return True
