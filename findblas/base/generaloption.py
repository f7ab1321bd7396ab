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
Option parsing, on top of optparse and configparser.

Options are declared in methods with a name ending in '_options', as a dict of tuples:

    {'long-name': (help, type, action, default[, short option][, list of choices])}

Each of these methods corresponds to a section in configuration files, named after the method
(for example, the options declared in search_options go in the [search] section).

The value of an option is determined as follows (last one wins):
  0. the default value of the option;
  1. the value in a configuration file;
  2. the value set through an environment variable <PREFIX>_<LONG_NAME> (e.g. $FINDBLAS_CACHE_FILE);
  3. the value set on the command line.
"""
import configparser
import os
import sys
from optparse import Option, OptionGroup, OptionParser

from findblas.base.fancylogger import getLogger, setLogLevel


ENABLE = 'enable'
DISABLE = 'disable'

# option types for lists of strings: separator, and how the separator is referred to in help output
LIST_TYPES = {
    'strlist': (',', 'comma'),
    'pathlist': (os.pathsep, 'pathsep'),
}

# actions for boolean options that also set the log level
LOG_ACTIONS = {
    'store_debuglog': 'DEBUG',
    'store_infolog': 'INFO',
}

# values of environment variables that do not enable a boolean option
ENV_FALSE_VALUES = ('0', 'no', 'false')


def check_list(option, opt, value):
    """Split value of option of a list type into a list of strings, dropping empty entries."""
    sep = LIST_TYPES[option.type][0]
    return [x for x in value.split(sep) if x]


class ExtOption(Option):
    """
    Option class with support for:
      - types for lists of strings ('strlist' is comma-separated, 'pathlist' is os.pathsep-separated);
      - --enable-<name> and --disable-<name> variants for boolean options;
      - actions that also set the log level ('store_debuglog', 'store_infolog');
      - keeping track of which options were set explicitly.
    """
    ACTIONS = Option.ACTIONS + tuple(LOG_ACTIONS)
    STORE_ACTIONS = Option.STORE_ACTIONS + tuple(LOG_ACTIONS)
    BOOLEAN_ACTIONS = ('store_true', 'store_false') + tuple(LOG_ACTIONS)

    TYPES = Option.TYPES + tuple(LIST_TYPES)
    TYPE_CHECKER = dict(Option.TYPE_CHECKER, **dict((typ, check_list) for typ in LIST_TYPES))

    def take_action(self, action, dest, opt, value, values, parser):
        """Perform action for this option; boolean options are flipped by a --disable-* prefix."""
        if action in self.BOOLEAN_ACTIONS:
            enabled = action != 'store_false'
            if opt.startswith('--%s-' % DISABLE):
                enabled = not enabled
            if enabled and action in LOG_ACTIONS:
                setLogLevel(LOG_ACTIONS[action])
            setattr(values, dest, enabled)
        else:
            Option.take_action(self, action, dest, opt, value, values, parser)

        if dest is not None:
            parser.explicit_dests.add(dest)

        return 1


class ExtOptionParser(OptionParser):
    """
    Option parser that also picks up options specified through the environment, e.g.:
      - 'export FINDBLAS_CACHE_FILE=/tmp/cache.json' implies --cache-file=/tmp/cache.json
      - 'export FINDBLAS_REQUIRED=1' implies --required ('0', 'no' or 'false' are ignored)
    """

    def __init__(self, *args, **kwargs):
        """
        Constructor.

        :param envvar_prefix: prefix for environment variables (default: name of program, in uppercase)
        """
        self.envvar_prefix = kwargs.pop('envvar_prefix', None)
        kwargs.setdefault('option_class', ExtOption)
        OptionParser.__init__(self, *args, **kwargs)

        self.epilog = "Boolean options can also be specified as --%s-<name> or --%s-<name>." % (ENABLE, DISABLE)

        self.log = getLogger(self.__class__.__name__)
        self.process_env_options = True
        self.environment_arguments = []
        # destinations of options that were set through the environment or on the command line
        self.explicit_dests = set()

    def _get_args(self, args):
        """Return arguments to parse, with the ones that correspond to environment variables in front."""
        args = OptionParser._get_args(self, args)
        if self.process_env_options:
            self.environment_arguments = self.get_env_options()
            args = self.environment_arguments + args
        return args

    def get_env_options(self):
        """Return list of command line arguments for the options that are specified through the environment."""
        prefix = self.envvar_prefix or self.get_prog_name().rsplit('.', 1)[0].upper()

        res = []
        for opt in self._get_all_options():
            if opt.action in ('help', 'version') or not opt._long_opts:
                continue
            name = opt._long_opts[0][2:]
            val = os.environ.get('%s_%s' % (prefix, name.replace('-', '_').upper()))
            if val is None:
                continue
            if opt.takes_value():
                res.append('--%s=%s' % (name, val))
            elif val.lower() not in ENV_FALSE_VALUES:
                res.append('--%s' % name)

        self.log.debug("Options specified through environment variables with prefix %s: %s", prefix, res)
        return res


class GeneralOption(object):
    """
    Collect the options declared in methods with a name ending in '_options', and determine their values.

    Named arguments starting with 'go_' are handled by this class, the others are passed down to the parser:
      - go_args: arguments to parse (default: sys.argv[1:])
      - go_configfiles: configuration files to parse (in addition to those specified via --configfiles)
      - go_nosystemexit: don't exit when parsing options fails
    """
    USAGE = None
    VERSION = None

    # no positional arguments, only options
    ALLOPTSMANDATORY = True

    DEFAULT_CONFIGFILES = None
    # log level to use when neither --debug nor --info is used
    DEFAULT_LOGLEVEL = None

    def __init__(self, **kwargs):
        go_args = kwargs.pop('go_args', None)
        self.no_system_exit = kwargs.pop('go_nosystemexit', False)
        self.configfiles = list(kwargs.pop('go_configfiles', None) or self.DEFAULT_CONFIGFILES or [])

        kwargs.setdefault('usage', self.USAGE)
        kwargs['version'] = self.VERSION
        self.parser = ExtOptionParser(**kwargs)

        self.log = getLogger(self.__class__.__name__)
        self.options = None
        self.args = None
        self.explicit_dests = set()

        # long option name to destination, per configuration file section
        self.section_options = {}
        self.auto_section_name = None

        self._logging_options()
        self._configfiles_options()
        self.main_options()

        self.parseoptions(options_list=go_args)

        # no options for e.g. --help
        if self.options is not None:
            self.parseconfigfiles()
            self._set_default_loglevel()
            self.postprocess()
            self.validate()

    def _logging_options(self):
        """Add options to control logging: debug and info"""
        opts = {
            'debug': ("Enable debug log mode", None, 'store_debuglog', False, 'd'),
            'info': ("Enable info log mode", None, 'store_infolog', False),
        }
        self.add_group_parser(opts, ("Debug and logging options", ''))

    def _configfiles_options(self):
        opts = {
            'configfiles': ("Parse (additional) configuration files", 'strlist', 'store', None),
        }
        self.add_group_parser(opts, ("Configuration file options", ''))

    def _set_default_loglevel(self):
        """Set default log level, unless log level was set via --debug or --info."""
        if self.DEFAULT_LOGLEVEL and not (self.options.debug or self.options.info):
            setLogLevel(self.DEFAULT_LOGLEVEL)

    def main_options(self):
        """Add the options declared in the methods with a name ending in '_options' (one section per method)."""
        for name in sorted(dir(self)):
            if name.endswith('_options') and not name.startswith(('_', 'main')):
                method = getattr(self, name)
                if callable(method):
                    self.auto_section_name = name[:-len('_options')]
                    self.log.debug("Adding options from %s (section %s)", name, self.auto_section_name)
                    method()
        self.auto_section_name = None

    def add_group_parser(self, opt_dict, description, section_name=None):
        """
        Add a group of options.

        :param opt_dict: dict with option specifications: {'long-name': (help, type, action, default, extra...)},
                         with optional extra details: a single character (short option), or a list (valid choices)
        :param description: tuple with title and description for this group of options
        :param section_name: name of configuration file section (default: the section for the current method)
        """
        if section_name is None:
            section_name = self.auto_section_name

        title, descr = description
        if section_name:
            title += " (configfile section %s)" % section_name
        group = OptionGroup(self.parser, title, descr or None)

        for name in sorted(opt_dict):
            hlp, typ, action, default = opt_dict[name][:4]
            dest = name.replace('-', '_')

            args = ['--%s' % name]
            details = {'dest': dest, 'action': action}
            if typ is not None:
                details['type'] = typ
            if default is not None:
                details['default'] = default

            extra_help = []
            if typ in LIST_TYPES:
                extra_help.append("type %s-separated list" % LIST_TYPES[typ][1])
                if default:
                    extra_help.append("default: %s" % LIST_TYPES[typ][0].join(default))
            else:
                if typ is not None:
                    extra_help.append("type %s" % typ)
                if default is not None and default is not False:
                    extra_help.append("default: %s" % (default if default != '' else "''"))

            for extra in opt_dict[name][4:]:
                if isinstance(extra, (list, tuple)):
                    details['choices'] = [str(x) for x in extra]
                    extra_help.append("choices: %s" % ', '.join(details['choices']))
                elif isinstance(extra, str) and len(extra) == 1:
                    args.insert(0, '-%s' % extra)
                else:
                    self.log.raiseException("add_group_parser: unknown detail for option %s: %s" % (name, extra))

            if action in ExtOption.BOOLEAN_ACTIONS:
                args.extend(['--%s-%s' % (ENABLE, name), '--%s-%s' % (DISABLE, name)])
                if default is True:
                    extra_help.append("disable with --%s-%s" % (DISABLE, name))
            else:
                details['metavar'] = name.upper()

            if extra_help:
                hlp += " (%s)" % '; '.join(extra_help)
            details['help'] = hlp

            group.add_option(*args, **details)

            if section_name:
                self.section_options.setdefault(section_name, {})[name] = dest

        self.parser.add_option_group(group)

    def parseoptions(self, options_list=None):
        """Parse the options specified on the command line and through the environment."""
        if options_list is None:
            options_list = sys.argv[1:]

        self.parser.explicit_dests = set()
        try:
            (self.options, self.args) = self.parser.parse_args(options_list)
        except SystemExit as err:
            self.log.debug("parseoptions: parsing options stopped with exit code %s", err.code)
            if self.no_system_exit:
                return
            raise
        self.explicit_dests = set(self.parser.explicit_dests)

        self.log.debug("parseoptions: options from environment: %s", self.parser.environment_arguments)

        if self.args and self.ALLOPTSMANDATORY:
            self.parser.error("Invalid arguments: %s" % ' '.join(self.args))

    def parseconfigfiles(self):
        """
        Parse configuration files, and use the values specified there for options
        that were not set through the environment or on the command line.
        """
        configfiles = self.configfiles + list(self.options.configfiles or [])
        configfiles = [path for path in configfiles if os.path.isfile(path)]
        if not configfiles:
            return

        cfgparser = configparser.ConfigParser()
        # option names are case sensitive
        cfgparser.optionxform = str
        try:
            parsed_files = cfgparser.read(configfiles)
        except configparser.Error as err:
            self.log.raiseException("parseconfigfiles: failed to parse %s: %s" % (', '.join(configfiles), err))
        self.log.debug("parseconfigfiles: parsed %s", parsed_files)

        cfg_args, cfg_dests = [], []
        for section in cfgparser.sections():
            section_options = self.section_options.get(section)
            if section_options is None:
                self.log.debug("parseconfigfiles: ignoring unknown section %s", section)
                continue

            for name, value in cfgparser.items(section):
                if name not in section_options:
                    self.log.raiseException("parseconfigfiles: no option corresponding with opt %s in section %s"
                                            % (name, section))

                if self.parser.get_option('--%s' % name).action in ExtOption.BOOLEAN_ACTIONS:
                    try:
                        enabled = cfgparser.getboolean(section, name)
                    except ValueError:
                        self.log.raiseException("parseconfigfiles: value '%s' for option %s in section %s "
                                                "is not a boolean" % (value, name, section))
                    cfg_args.append('--%s-%s' % (ENABLE if enabled else DISABLE, name))
                else:
                    cfg_args.append('--%s=%s' % (name, value))
                cfg_dests.append(section_options[name])

        if not cfg_args:
            return

        self.log.debug("parseconfigfiles: options from configuration files: %s", cfg_args)
        self.parser.process_env_options = False
        try:
            (cfg_options, _) = self.parser.parse_args(cfg_args)
        finally:
            self.parser.process_env_options = True

        for dest in cfg_dests:
            if dest in self.explicit_dests:
                self.log.debug("parseconfigfiles: %s was set explicitly, ignoring value in configuration file", dest)
            else:
                setattr(self.options, dest, getattr(cfg_options, dest))

    def get_options_by_section(self, section):
        """Return dict with values of all options in the specified section, indexed by destination."""
        dests = self.section_options.get(section, {}).values()
        return dict((dest, getattr(self.options, dest, None)) for dest in dests)

    def postprocess(self):
        """Additional processing of option values."""
        pass

    def validate(self):
        """Final step, allows for validating the option values."""
        pass
