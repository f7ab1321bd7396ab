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
Unit tests for filetools.py
"""
import os
import stat
import sys
from test.framework.utilities import EnhancedTestCase, TestLoaderFiltered
from unittest import TextTestRunner

import findblas.tools.filetools as ft
from findblas.tools.build_log import FindBlasError
from findblas.tools.config import ERROR, IGNORE


class FileToolsTest(EnhancedTestCase):
    """ Testcase for filetools module """

    def test_read_write_file(self):
        """Test reading/writing files."""
        fp = os.path.join(self.test_prefix, 'test.txt')
        txt = "test123"
        ft.write_file(fp, txt)
        self.assertEqual(ft.read_file(fp), txt)

        txt2 = '\n'.join(['test', '123'])
        ft.write_file(fp, txt2, append=True)
        self.assertEqual(ft.read_file(fp), txt + txt2)

        # parent directories are created if needed
        fp = os.path.join(self.test_prefix, 'one', 'two', 'three.txt')
        ft.write_file(fp, txt)
        self.assertEqual(ft.read_file(fp), txt)

        # bytes are written as is
        ft.write_file(fp, b'\x00\x01')
        self.assertEqual(ft.read_file(fp, mode='rb'), b'\x00\x01')

        # test use of 'log_error' for read_file
        nosuchfile = os.path.join(self.test_prefix, 'nosuchfile.txt')
        self.assertEqual(ft.read_file(nosuchfile, log_error=False), None)
        self.assertErrorRegex(FindBlasError, "Failed to read .*nosuchfile.txt", ft.read_file, nosuchfile)

        # writing to a directory fails
        self.assertErrorRegex(FindBlasError, "Failed to write to", ft.write_file, self.test_prefix, txt)

    def test_remove(self):
        """Test remove_file and remove_dir functions."""
        testfile = os.path.join(self.test_prefix, 'foo')
        ft.write_file(testfile, 'bar')
        self.assertTrue(os.path.exists(testfile))
        ft.remove_file(testfile)
        self.assertFalse(os.path.exists(testfile))
        # removing a non-existing file is not a problem
        ft.remove_file(testfile)

        # broken symlinks are removed too
        symlink = os.path.join(self.test_prefix, 'broken_link')
        os.symlink(os.path.join(self.test_prefix, 'nosuchfile'), symlink)
        ft.remove_file(symlink)
        self.assertFalse(os.path.islink(symlink))

        testdir = os.path.join(self.test_prefix, 'findblas-check-123')
        ft.write_file(os.path.join(testdir, 'CheckFunctionExists.c'), '')
        ft.remove_dir(testdir)
        self.assertFalse(os.path.exists(testdir))
        ft.remove_dir(testdir)

        ft.write_file(testfile, 'bar')
        self.assertErrorRegex(FindBlasError, "Failed to remove directory", ft.remove_dir, testfile)

    def test_mkdir(self):
        """Test mkdir function."""
        def check_mkdir(path, error=None, **kwargs):
            abspath = os.path.join(self.test_prefix, path)
            if error is None:
                ft.mkdir(abspath, **kwargs)
                self.assertTrue(os.path.exists(abspath) and os.path.isdir(abspath))
            else:
                self.assertErrorRegex(FindBlasError, error, ft.mkdir, abspath, **kwargs)

        check_mkdir('lib')
        check_mkdir('lib/openblas', parents=False)
        check_mkdir('lib/intel64/mkl', error="Failed to create directory")
        check_mkdir('lib/intel64/mkl', parents=True)
        # existing directories are fine
        check_mkdir('lib')

        # relative paths are resolved w.r.t. current working directory
        os.chdir(self.test_prefix)
        ft.mkdir('include', parents=True)
        self.assertTrue(os.path.isdir(os.path.join(self.test_prefix, 'include')))

    def test_which(self):
        """Test which function for locating commands."""
        sh = ft.which('sh')
        self.assertTrue(sh and os.path.isabs(sh) and os.path.basename(sh) == 'sh')

        nosuchcc = 'nosuchcc_findblas'
        self.assertEqual(ft.which(nosuchcc), None)
        self.assertEqual(ft.which(nosuchcc, on_error=IGNORE), None)
        self.assertErrorRegex(FindBlasError, "Could not find command 'nosuchcc_findblas'", ft.which, nosuchcc,
                              on_error=ERROR)
        self.assertErrorRegex(FindBlasError, "Invalid value for 'on_error'", ft.which, nosuchcc, on_error='foo')

        bindir = os.path.join(self.test_prefix, 'bin')
        os.environ['PATH'] = os.pathsep.join([bindir, os.environ.get('PATH', '')])

        # directories and files that can not be executed are not considered
        ft.mkdir(os.path.join(bindir, 'mycc'), parents=True)
        self.assertEqual(ft.which('mycc', on_error=IGNORE), None)
        ft.remove_dir(os.path.join(bindir, 'mycc'))

        mycc = os.path.join(bindir, 'mycc')
        ft.write_file(mycc, '#!/bin/sh\n')
        os.chmod(mycc, stat.S_IRUSR | stat.S_IWUSR)
        self.assertEqual(ft.which('mycc', on_error=IGNORE), None)

        os.chmod(mycc, stat.S_IRUSR | stat.S_IXUSR)
        self.assertEqual(ft.which('mycc'), mycc)

        # paths to commands are not looked up in $PATH
        self.assertEqual(ft.which(mycc), mycc)
        self.assertEqual(ft.which(os.path.join(bindir, 'nosuchcc'), on_error=IGNORE), None)


def suite():
    """ returns all the testcases in this module """
    return TestLoaderFiltered().loadTestsFromTestCase(FileToolsTest, sys.argv[1:])


if __name__ == '__main__':
    res = TextTestRunner(verbosity=1).run(suite())
    sys.exit(len(res.failures))
