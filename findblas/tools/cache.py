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
Persistent cache for probe results and the final BLAS configuration.

Entries are stored in a JSON file, each entry holding a value, a type
(one of BOOL, PATH, FILEPATH, STRING, INTERNAL), a help string and an 'advanced' flag.
"""
import copy
import json
import os

from findblas.base import fancylogger
from findblas.tools.build_log import FindBlasError, FindBlasExit
from findblas.tools.filetools import read_file, write_file


_log = fancylogger.getLogger('cache')


BOOL = 'BOOL'
FILEPATH = 'FILEPATH'
INTERNAL = 'INTERNAL'
PATH = 'PATH'
STRING = 'STRING'
CACHE_TYPES = (BOOL, FILEPATH, INTERNAL, PATH, STRING)

CACHE_FORMAT_VERSION = 1

NOTFOUND_SUFFIX = '-NOTFOUND'
FALSE_CONSTANTS = ('0', 'OFF', 'NO', 'FALSE', 'N', 'IGNORE', 'NOTFOUND')


def is_true(value):
    """
    Determine whether given cache value evaluates to true:
    empty values, false constants and values ending in -NOTFOUND are false.
    """
    if isinstance(value, bool):
        return value
    elif isinstance(value, (list, tuple)):
        return any(is_true(x) for x in value)
    elif value is None:
        return False

    value = str(value).strip()
    return bool(value) and value.upper() not in FALSE_CONSTANTS and not value.endswith(NOTFOUND_SUFFIX)


def notfound_value(name):
    """Return the value that is stored for an unsuccessful lookup of the cache entry with given name."""
    return name + NOTFOUND_SUFFIX


class ProbeCache(object):
    """Cache of probe results, backed by a JSON file."""

    def __init__(self, path=None):
        """
        Create an (empty) cache.

        :param path: location of the JSON file the cache is saved to (no file if None)
        """
        self.path = path
        self.entries = {}
        self.log = fancylogger.getLogger(self.__class__.__name__)

    @classmethod
    def load(cls, path):
        """
        Load cache from specified JSON file; a non-existing file results in an empty cache.
        """
        cache = cls(path)

        if os.path.exists(path):
            txt = read_file(path)
            try:
                data = json.loads(txt)
            except ValueError as err:
                raise FindBlasError("Failed to parse cache file %s: %s", path, err,
                                    exit_code=FindBlasExit.CACHE_ERROR)

            if not isinstance(data, dict) or not isinstance(data.get('entries'), dict):
                raise FindBlasError("Cache file %s does not contain cache entries", path,
                                    exit_code=FindBlasExit.CACHE_ERROR)

            for name, entry in data['entries'].items():
                if not isinstance(entry, dict) or 'value' not in entry:
                    raise FindBlasError("Malformed entry '%s' in cache file %s: %s", name, path, entry,
                                        exit_code=FindBlasExit.CACHE_ERROR)
                typ = entry.get('type', STRING)
                if typ not in CACHE_TYPES:
                    raise FindBlasError("Unknown type '%s' for entry '%s' in cache file %s", typ, name, path,
                                        exit_code=FindBlasExit.CACHE_ERROR)
                cache.entries[name] = {
                    'advanced': bool(entry.get('advanced', False)),
                    'help': entry.get('help', ''),
                    'type': typ,
                    'value': entry['value'],
                }

            _log.info("Loaded %d entries from cache file %s", len(cache.entries), path)
        else:
            _log.info("Cache file %s does not exist (yet), starting from empty cache", path)

        return cache

    def save(self, path=None):
        """Save cache to JSON file (to the location it was loaded from by default)."""
        if path is None:
            path = self.path
        if path is None:
            raise FindBlasError("No location specified to save cache to", exit_code=FindBlasExit.CACHE_ERROR)

        data = {
            'version': CACHE_FORMAT_VERSION,
            'entries': self.entries,
        }
        write_file(path, json.dumps(data, indent=2, sort_keys=True) + '\n')
        self.log.info("Saved %d cache entries to %s", len(self.entries), path)

    def __contains__(self, name):
        return name in self.entries

    def __len__(self):
        return len(self.entries)

    def get(self, name, default=None):
        """Return value of cache entry with given name, or specified default value if there is no such entry."""
        if name in self.entries:
            return self.entries[name]['value']
        else:
            return default

    def get_entry(self, name):
        """Return (copy of) cache entry with given name, or None."""
        return copy.deepcopy(self.entries.get(name))

    def set(self, name, value, typ=STRING, help=None, force=False):
        """
        Define cache entry; an existing entry is only overwritten when force is enabled.

        :return: value of the cache entry after the update
        """
        if typ not in CACHE_TYPES:
            raise FindBlasError("Unknown type for cache entry '%s': %s", name, typ, exit_code=FindBlasExit.VALUE_ERROR)

        if name in self.entries and not force:
            self.log.debug("Keeping existing value for cache entry %s: %s", name, self.entries[name]['value'])
        else:
            advanced = self.entries.get(name, {}).get('advanced', False)
            self.entries[name] = {
                'advanced': advanced or typ == INTERNAL,
                'help': help or '',
                'type': typ,
                'value': value,
            }
            self.log.debug("Cache entry %s set to %s (type: %s)", name, value, typ)

        return self.entries[name]['value']

    def mark_as_advanced(self, *names):
        """Mark cache entries with given names as advanced (unknown names are ignored)."""
        for name in names:
            if name in self.entries:
                self.entries[name]['advanced'] = True

    def remove(self, name):
        """Remove cache entry with given name, if it is there."""
        if self.entries.pop(name, None) is not None:
            self.log.debug("Removed cache entry %s", name)

    def clear(self):
        """Remove all cache entries."""
        self.log.info("Clearing all %d cache entries", len(self.entries))
        self.entries = {}

    def items(self, advanced=True):
        """Return sorted list of (name, value) tuples; advanced entries are skipped unless requested."""
        return [(name, entry['value']) for name, entry in sorted(self.entries.items())
                if advanced or not entry['advanced']]
