# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

"""This module contains in-place modifications to the LinkHeader module to
satisfy RFC6690 constraints, as needed for the discovery document at
``/.well-known/core``."""

import link_header

#: Attributes whose values are bare numbers and are not quoted
UNQUOTED_ATTRS = ('ct', 'sz')


class LinkFormat(link_header.LinkHeader):
    def __str__(self):
        return ','.join(str(link) for link in self.links)


class Link(link_header.Link):
    # Like the link_header module's serialization, but with ';' instead of
    # '; ', and with all values quoted except the numeric ones
    def __str__(self):
        def str_pair(key, value):
            if value is None:
                return key
            elif key in UNQUOTED_ATTRS:
                return '%s=%s' % (key, value)
            else:
                return '%s="%s"' % (key, value.replace('"', r'\"'))
        return ';'.join(['<%s>' % self.href] +
                        [str_pair(key, value)
                         for key, value in self.attr_pairs])


def parse(linkformat):
    data = link_header.parse(linkformat)
    data.__class__ = LinkFormat
    for l in data.links:
        l.__class__ = Link
    return data
