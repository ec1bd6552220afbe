#!/usr/bin/env python3

# SPDX-FileCopyrightText: the webthing-coap contributors
#
# SPDX-License-Identifier: MIT

from setuptools import setup, find_packages


setup(
    name="webthing-coap",
    version="0.1.0",
    description="Web Thing API server over CoAP",
    long_description=open("README.rst", encoding="utf8").read(),
    long_description_content_type="text/x-rst",
    license="MIT",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiocoap >= 0.4.17",
        "LinkHeader",
        "jsonschema",
        "zeroconf",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Framework :: AsyncIO",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Topic :: Internet",
        "Topic :: Home Automation",
    ],
)
