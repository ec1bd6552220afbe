# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""Rendering of Thing Descriptions and of the link-format discovery document

:func:`get_description` completes a thing's own description with the request
context (``base``) and the fixed security declaration. The discovery
document served at ``/.well-known/core`` is derived from such a description
by :func:`get_core_links`: it lists the thing itself, its top-level links
and every link of its properties, actions and events, in the order the thing
declares them.

>>> from webthing_coap import Thing
>>> lamp = Thing('urn:dev:ops:lamp', 'Lamp', ['OnOffSwitch'])
>>> lamp.add_available_event('overheated', {'type': 'number'})
>>> get_core_link_format(get_description(lamp, 'localhost'))
'</properties>;rt="properties";ct=50,</actions>;rt="actions";ct=50,</events>;rt="events";ct=50,</events/overheated>;rt="event";ct=50'
"""

from .constants import DEFAULT_SCHEME, JSON_CT
from .util.linkformat import Link, LinkFormat

#: Security declaration attached to every description; the server does not
#: implement any authentication
SECURITY_DEFINITIONS = {
    'nosec_sc': {
        'scheme': 'nosec',
    },
}

#: Links every discovery document ends with
WELL_KNOWN_TRAILER = ('/', '/.well-known/core')

_JSON_CT = str(int(JSON_CT))


def get_description(thing, host, scheme=DEFAULT_SCHEME):
    """Create the description of *thing* as served to a request for *host*
    (the request's Uri-Host, possibly with a port)"""
    description = thing.as_thing_description()

    if thing.get_href() != '/':
        description['href'] = thing.get_href()

    description['base'] = '{}://{}{}'.format(scheme, host, thing.get_href())
    description['securityDefinitions'] = {
        name: dict(definition)
        for name, definition in SECURITY_DEFINITIONS.items()
    }
    description['security'] = 'nosec_sc'
    return description


def _property_rt(resource):
    types = resource.get('@type')
    if isinstance(types, list):
        return ' '.join(types)
    return types


def get_core_links(description):
    """Build the list of :class:`.Link` objects advertising the resources of
    a single thing description"""
    links = []

    if 'href' in description:
        links.append(Link(description['href']))

    for link in description.get('links', ()):
        links.append(Link(link['href'], [['rt', link['rel']], ['ct', _JSON_CT]]))

    for resource in description.get('properties', {}).values():
        rt = _property_rt(resource)
        for link in resource.get('links', ()):
            attrs = []
            if rt is not None:
                attrs.append(['rt', rt])
            attrs.append(['ct', _JSON_CT])
            if 'title' in resource:
                attrs.append(['title', resource['title']])
            links.append(Link(link['href'], attrs))

    for group in ('actions', 'events'):
        for resource in description.get(group, {}).values():
            for link in resource.get('links', ()):
                links.append(Link(link['href'], [['rt', link['rel']], ['ct', _JSON_CT]]))

    return links


def get_core_link_format(description):
    """Create the link-format payload advertising the resources of a single
    thing description"""
    return str(LinkFormat(get_core_links(description)))


def get_discovery_document(descriptions):
    """Create the complete ``/.well-known/core`` payload for a number of
    thing descriptions, ending in the server's root and the discovery
    resource itself"""
    links = []
    for description in descriptions:
        links.extend(get_core_links(description))
    links.extend(Link(href) for href in WELL_KNOWN_TRAILER)
    return str(LinkFormat(links))
