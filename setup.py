# #
# Copyright 2025 Ghent University
#
# This file is part of findblas,
# originally created by the HPC team of Ghent University (http://ugent.be/hpc/en),
# with support of Ghent University (http://ugent.be/hpc),
# the Flemish Supercomputer Centre (VSC) (https://www.vscentrum.be),
# Flemish Research Foundation (FWO) (http://www.fwo.be/en)
# and the Department of Economy, Science and Innovation (EWI) (http://www.ewi-vlaanderen.be/en).
#
# findblas is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation v2.
#
# findblas is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with findblas.  If not, see <http://www.gnu.org/licenses/>.
# #
"""
This script can be used to install findblas, e.g. using:
  pip install --user .
or
  pip install --prefix=$HOME/findblas .
"""

import os

from setuptools import setup

from findblas.tools.version import VERSION

API_VERSION = str(VERSION).split('.')[0]


# Utility function to read README file
def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as fh:
        return fh.read()


findblas_packages = [
    "findblas", "findblas.base", "findblas.framework", "findblas.tools", "findblas.vendors",
    "test.framework", "test",
]

setup(
    name = "findblas",
    version = str(VERSION),
    author = "findblas community",
    description = """findblas locates a library that provides the BLAS API, \
checks that it can be linked, and reports the resulting configuration.""",
    license = "GPLv2",
    keywords = "BLAS linear algebra library detection build configuration HPC scientific",
    packages = findblas_packages,
    package_dir = {'test.framework': "test/framework"},
    entry_points = {
        'console_scripts': [
            'findblas = findblas.main:main_with_exit',
        ],
    },
    long_description = """findblas searches for a library with BLAS API (ATLAS, Intel MKL, OpenBLAS, ...),
checks whether the BLAS routines can be linked using a C compiler, and reports the configuration
that downstream builds can use.

""" + read("README.rst"),
    long_description_content_type = "text/x-rst",
    classifiers = [
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: GNU General Public License v2 (GPLv2)",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS :: MacOS X",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Build Tools",
    ],
    platforms = "Linux",
    python_requires = ">=3.6",
    install_requires = [
        "coloredlogs",
        "humanfriendly",
        "rich",
    ],
    extras_require = {
        "test": ["pytest"],
    },
    test_suite = "test.framework.suite",
    zip_safe = False,
)
