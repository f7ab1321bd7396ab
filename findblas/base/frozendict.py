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
Read-only dictionaries, used to hold configuration settings that should not change after initialisation.
"""
from collections.abc import Mapping


class FrozenDict(Mapping):
    """A dictionary that can not be changed once it was created."""

    def __init__(self, *args, **kwargs):
        self._data = dict(*args, **kwargs)

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __repr__(self):
        return '<%s %r>' % (self.__class__.__name__, self._data)


class FrozenDictKnownKeys(FrozenDict):
    """A frozen dictionary that only accepts (and only knows about) the keys listed in KNOWN_KEYS."""

    KNOWN_KEYS = []

    def __init__(self, *args, **kwargs):
        data = dict(*args, **kwargs)

        unknown_keys = sorted(key for key in data if key not in self.KNOWN_KEYS)
        if unknown_keys:
            raise KeyError("Unknown keys for %s: %s" % (self.__class__.__name__, ', '.join(unknown_keys)))

        super(FrozenDictKnownKeys, self).__init__(data)

    def __getitem__(self, key):
        if key not in self.KNOWN_KEYS:
            raise KeyError("Unknown key '%s' for %s (known keys: %s)" %
                           (key, self.__class__.__name__, ', '.join(sorted(self.KNOWN_KEYS))))
        return super(FrozenDictKnownKeys, self).__getitem__(key)
