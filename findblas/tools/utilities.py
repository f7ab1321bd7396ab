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
Small helpers for lists, quoting and module discovery.
"""
import importlib
import itertools
import pkgutil

from findblas.base import fancylogger
from findblas.tools.build_log import FindBlasError


_log = fancylogger.getLogger('utilities')


def flatten(lst):
    """Concatenate the lists in the given list (or other iterable) into a single list."""
    return list(itertools.chain.from_iterable(lst))


def nub(list_):
    """Return copy of given list without duplicates; the first occurrence of each item determines its position."""
    return list(dict.fromkeys(list_))


def shell_quote(token):
    """Quote token so a POSIX shell passes it on as is, without any expansion."""
    # a single quote can not be escaped within single quotes, so close the quoted string around it
    return "'%s'" % str(token).replace("'", "'\"'\"'")


def cmake_quote(token):
    """Wrap provided token in double quotes, so it can be used as a quoted argument in CMake syntax."""
    token = str(token).replace('\\', '\\\\').replace('"', '\\"').replace('$', '\\$')
    return '"%s"' % token


def import_available_modules(namespace):
    """
    Import all modules in the package with the given name (e.g. 'findblas.vendors'), in alphabetical order.

    :return: list of imported modules
    """
    try:
        pkg = importlib.import_module(namespace)
    except ImportError as err:
        raise FindBlasError("Failed to import %s: %s", namespace, err)

    # a package may be spread across multiple sys.path entries
    mod_names = sorted(set(modinfo.name for modinfo in pkgutil.iter_modules(pkg.__path__)))

    modules = []
    for mod_name in mod_names:
        modpath = '%s.%s' % (namespace, mod_name)
        _log.debug("Importing %s", modpath)
        try:
            modules.append(importlib.import_module(modpath))
        except ImportError as err:
            raise FindBlasError("Failed to import %s: %s", modpath, err)

    return modules


def get_subclasses(klass, include_base_class=False):
    """Return list of all (direct and indirect) subclasses of the given class, parents before children."""
    res = [klass] if include_base_class else []
    for subclass in klass.__subclasses__():
        res.extend(get_subclasses(subclass, include_base_class=True))
    return nub(res)
