#!/usr/bin/env python
#
# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.
#
# The dependencies, the entry points, and the tool configuration are declared in setup.cfg.
#

import os
from setuptools import setup, find_packages

__version__ = None
VERSION_FILE = os.path.join(os.path.dirname(__file__), "rawrepl", "_version.py")
exec(open(VERSION_FILE).read())  # Adds __version__ to globals

with open(os.path.join(os.path.dirname(__file__), "README.md"), "r") as fh:
    long_description = fh.read()

args = dict(
    name="rawrepl",
    version=__version__,
    description="Raw REPL protocol driver for MicroPython boards over serial lines and WebREPL sockets.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["rawrepl", "rawrepl.*"]),
    package_data={"rawrepl": ["py.typed"]},
    author="rawrepl contributors",
    license="MIT",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Embedded Systems",
        "Topic :: Software Development :: Libraries",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    keywords="micropython repl serial webrepl esp32 esp8266",
)

setup(**args)
