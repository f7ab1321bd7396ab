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
Various test utility functions.
"""
import os
import re
import shutil
import stat
import sys
import tempfile
import unittest

import findblas.tools.compiler as compiler
from findblas.base import fancylogger
from findblas.base.testing import TestCase as _EnhancedTestCase
from findblas.main import main
from findblas.tools.config import Singleton, init_build_options
from findblas.tools.filetools import mkdir, read_file, write_file
from findblas.tools.options import CONFIG_ENV_VAR_PREFIX, FindBlasOptions, parse_options
from findblas.tools.run import RunShellCmdResult
from findblas.tools.systemtools import LINUX


# make sure tests are robust against any non-default configuration settings;
# involves ignoring any existing configuration files that are picked up, and cleaning the environment
# this is tackled here rather than in suite.py, to make sure this is also done when test modules are ran separately

# clean up environment from unwanted $FINDBLAS_X env vars
for key in list(os.environ.keys()):
    if key.startswith('%s_' % CONFIG_ENV_VAR_PREFIX):
        del os.environ[key]

# ignore any existing configuration files
FindBlasOptions.DEFAULT_CONFIGFILES = []

# environment variables that influence where libraries are searched for
SEARCH_ENV_VARS = ['BLAS_DIR', 'BLAS_LIB_DIR', 'CC', 'DYLD_LIBRARY_PATH', 'LD_LIBRARY_PATH', 'LIB', 'MKL_LIB_DIR',
                   'OpenBLAS_HOME']

FAKE_CC_TXT = '#!/bin/sh\necho "fake C compiler, should not be run"\nexit 1\n'


class EnhancedTestCase(_EnhancedTestCase):
    """Enhanced test case, provides extra functionality (e.g. an assertErrorRegex method)."""

    def setUp(self):
        """Set up testcase."""
        super(EnhancedTestCase, self).setUp()

        # make sure option parser doesn't pick up any cmdline arguments/options
        while len(sys.argv) > 1:
            sys.argv.pop()

        # keep track of log handlers
        log = fancylogger.getLogger()
        self.orig_log_handlers = log.handlers[:]

        log.info("setting up test %s" % self.id())

        self.log = fancylogger.getLogger(self.__class__.__name__)
        fd, self.logfile = tempfile.mkstemp(suffix='.log', prefix='findblas-test-')
        os.close(fd)
        self.cwd = os.getcwd()

        # use a subdirectory for this test (which we can clean up easily after the test completes)
        self.test_prefix = tempfile.mkdtemp(prefix='findblas-test-')
        self.cache_file = os.path.join(self.test_prefix, 'findblas_cache.json')

        # keep track of original environment to restore
        self.orig_environ = dict(os.environ)
        unset_env_vars(SEARCH_ENV_VARS)

        self.orig_run_shell_cmd = compiler.run_shell_cmd
        # list of (symbol, libraries, command) tuples for link checks done via mock_linker
        self.link_checks = []

        init_config()

    def tearDown(self):
        """Clean up after running testcase."""
        super(EnhancedTestCase, self).tearDown()

        self.log.info("Cleaning up for test %s", self.id())

        # go back to where we were before
        os.chdir(self.cwd)

        # restore original environment
        restore_env(self.orig_environ)

        compiler.run_shell_cmd = self.orig_run_shell_cmd

        # remove any log handlers that were added (so that log files can be effectively removed)
        log = fancylogger.getLogger()
        new_log_handlers = [h for h in log.handlers if h not in self.orig_log_handlers]
        for log_handler in new_log_handlers:
            log_handler.close()
            log.removeHandler(log_handler)

        # cleanup test tmp dir
        for path in [self.test_prefix, self.logfile]:
            try:
                if os.path.isdir(path):
                    shutil.rmtree(path)
                elif os.path.exists(path):
                    os.remove(path)
            except (OSError, IOError):
                pass

        cleanup()

    def mock_libs(self, libdir, libs):
        """
        Create fake library files in specified directory.

        :param libs: dict with list of exported symbols for each library base name;
                     symbols are written to the library file, one per line
        :return: dict with path to fake library file for each library base name
        """
        mkdir(libdir, parents=True)
        res = {}
        for name, symbols in libs.items():
            res[name] = os.path.join(libdir, 'lib%s.so' % name)
            write_file(res[name], '\n'.join(symbols) + '\n')
        return res

    def mock_linker(self):
        """
        Replace the link checks with a fake linker, which considers a symbol to be available
        if it is listed in one of the (fake) library files that are linked with.
        """
        fake_cc = os.path.join(self.test_prefix, 'bin', 'cc')
        write_file(fake_cc, FAKE_CC_TXT)
        os.chmod(fake_cc, stat.S_IRUSR | stat.S_IWUSR | stat.S_IXUSR)
        os.environ['CC'] = fake_cc

        def fake_run_shell_cmd(cmd, work_dir=None):
            """Fake link check."""
            symbol = None
            for arg in cmd:
                res = re.match('^-DCHECK_FUNCTION_EXISTS=(.*)$', arg)
                if res:
                    symbol = res.group(1)

            libs = [arg for arg in cmd[1:] if os.path.isfile(arg) and not arg.endswith('.c')]
            exported = set()
            for lib in libs:
                exported.update(read_file(lib).split())

            self.link_checks.append((symbol, libs, cmd))

            exit_code = 0 if symbol in exported else 1
            output = '' if exit_code == 0 else "undefined reference to `%s'" % symbol
            return RunShellCmdResult(cmd=' '.join(cmd), exit_code=exit_code, output=output, work_dir=work_dir)

        compiler.run_shell_cmd = fake_run_shell_cmd

    def run_main(self, args, raise_error=False, search_system_paths=False):
        """
        Helper method to call findblas main function, with mocked stdout/stderr.

        :return: tuple with BLAS configuration (or error), stdout and stderr
        """
        cleanup()

        # use cache file in test directory (can be overruled via args)
        args = ['--cache-file=%s' % self.cache_file] + args
        if not search_system_paths:
            args = ['--disable-system-paths'] + args

        res = None
        with self.mocked_stdout_stderr():
            try:
                res = main(args=args, logfile=self.logfile, testing=True)
            except Exception as err:
                if raise_error:
                    raise err
                res = err
            stdout, stderr = self.get_stdout(), self.get_stderr()

        return res, stdout, stderr


class TestLoaderFiltered(unittest.TestLoader):
    """Test load that supports filtering of tests based on name."""

    def loadTestsFromTestCase(self, test_case_class, filters):
        """Return a suite of all tests cases contained in test_case_class."""

        test_case_names = self.getTestCaseNames(test_case_class)
        test_cnt = len(test_case_names)
        retained_test_names = []
        if len(filters) > 0:
            for test_case_name in test_case_names:
                if any(filt in test_case_name for filt in filters):
                    retained_test_names.append(test_case_name)

            retained_tests = ', '.join(retained_test_names)
            tup = (test_case_class.__name__, '|'.join(filters), len(retained_test_names), test_cnt, retained_tests)
            print("Filtered %s tests using '%s', retained %d/%d tests: %s" % tup)

            test_cases = [test_case_class(t) for t in retained_test_names]
        else:
            test_cases = [test_case_class(test_case_name) for test_case_name in test_case_names]

        return self.suiteClass(test_cases)


def cleanup():
    """Perform cleanup of singletons."""
    # clear Singleton instances, to start afresh
    Singleton._instances.clear()

    # reset to make sure tempfile picks up new temporary directory to use
    tempfile.tempdir = None


def init_config(args=None, build_options=None):
    """
    (re)initialize configuration

    By default, the platform is fixed to Linux and the platform-conventional library directories are not searched.
    """
    cleanup()

    fb_go = parse_options(args=args or [])

    if build_options is None:
        build_options = {}
    build_options.setdefault('os_type', LINUX)
    build_options.setdefault('system_paths', False)
    init_build_options(build_options=build_options, cmdline_options=fb_go.options)

    return fb_go.options


def unset_env_vars(keys):
    """Unset specified environment variables, return dict with their previous values."""
    old_values = {}
    for key in keys:
        if key in os.environ:
            old_values[key] = os.environ.pop(key)
    return old_values


def restore_env(env):
    """Restore environment to the specified (copy of) os.environ."""
    for key in [k for k in os.environ if k not in env]:
        del os.environ[key]
    for key, value in env.items():
        if os.environ.get(key) != value:
            os.environ[key] = value
