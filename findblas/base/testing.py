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
Base class for findblas unit tests.
"""
import re
import sys
from contextlib import contextmanager
from io import StringIO
from unittest import TestCase as OrigTestCase


class TestCase(OrigTestCase):
    """Test case with support for matching error messages, and for capturing stdout/stderr."""

    def setUp(self):
        """Prepare test case."""
        super(TestCase, self).setUp()
        self.maxDiff = None
        self.orig_sys_stdout = sys.stdout
        self.orig_sys_stderr = sys.stderr

    def tearDown(self):
        """Cleanup after running a test."""
        self.mock_stdout(False)
        self.mock_stderr(False)
        super(TestCase, self).tearDown()

    def assertErrorRegex(self, error, regex, call, *args, **kwargs):
        """
        Check whether calling the specified function results in the expected error,
        and whether the error message matches the given regular expression.

        Example: self.assertErrorRegex(FindBlasError, "Failed to read", read_file, '/no/such/file')
        """
        with self.assertRaises(error) as cm:
            call(*args, **kwargs)

        err = cm.exception
        if getattr(err, 'msg', None) is not None:
            msg = err.msg
        elif err.args:
            msg = err.args[0]
        else:
            msg = err
        msg = str(msg)

        self.assertTrue(re.search(regex, msg), "Pattern '%s' should be found in: %s" % (regex, msg))

    def mock_stdout(self, enable):
        """Start (or stop) capturing output written to stdout."""
        sys.stdout.flush()
        sys.stdout = StringIO() if enable else self.orig_sys_stdout

    def mock_stderr(self, enable):
        """Start (or stop) capturing output written to stderr."""
        sys.stderr.flush()
        sys.stderr = StringIO() if enable else self.orig_sys_stderr

    def get_stdout(self):
        """Return output captured from stdout so far."""
        return sys.stdout.getvalue()

    def get_stderr(self):
        """Return output captured from stderr so far."""
        return sys.stderr.getvalue()

    @contextmanager
    def mocked_stdout_stderr(self):
        """Context manager to capture output written to stdout and stderr."""
        self.mock_stdout(True)
        self.mock_stderr(True)
        try:
            yield
        finally:
            self.mock_stdout(False)
            self.mock_stderr(False)
