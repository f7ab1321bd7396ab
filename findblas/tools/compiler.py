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
Link checks: verify that a function can be linked against a given set of libraries,
by compiling and linking a minimal C program with the C compiler.
"""
import os
import shlex
import tempfile

from findblas.base import fancylogger
from findblas.tools.build_log import FindBlasError, FindBlasExit
from findblas.tools.cache import INTERNAL, is_true
from findblas.tools.config import IGNORE, build_option
from findblas.tools.filetools import remove_dir, which, write_file
from findblas.tools.libsearch import FRAMEWORK_SUFFIX
from findblas.tools.run import run_shell_cmd


_log = fancylogger.getLogger('compiler')


DEFAULT_COMPILER = 'cc'

CHECK_FUNCTION_EXISTS_SRC_NAME = 'CheckFunctionExists.c'
CHECK_FUNCTION_EXISTS_SRC = """#ifdef CHECK_FUNCTION_EXISTS

#ifdef __cplusplus
extern "C"
#endif
  char CHECK_FUNCTION_EXISTS(void);

int main(int ac, char* av[])
{
  CHECK_FUNCTION_EXISTS();
  if (ac > 1000) {
    return *av[0];
  }
  return 0;
}

#else
#error "CHECK_FUNCTION_EXISTS has to specify the function"
#endif
"""


def get_compiler():
    """
    Determine C compiler command to use for link checks:
    'compiler' build option, $CC or 'cc' (in that order of preference).

    :return: list with compiler command and its arguments (if any)
    """
    compiler = build_option('compiler', default=None) or os.environ.get('CC') or DEFAULT_COMPILER

    compiler_cmd = shlex.split(compiler)
    if not compiler_cmd:
        raise FindBlasError("Empty compiler command specified", exit_code=FindBlasExit.MISSING_COMPILER)

    compiler_path = which(compiler_cmd[0], on_error=IGNORE)
    if compiler_path is None:
        raise FindBlasError("C compiler '%s' not found, required to check whether BLAS libraries can be linked",
                            compiler_cmd[0], exit_code=FindBlasExit.MISSING_COMPILER)

    return [compiler_path] + compiler_cmd[1:]


def library_link_args(libraries):
    """
    Return list of linker arguments for given libraries:
    paths to library files and linker flags are passed as is, macOS frameworks via -F and -framework.
    """
    res = []
    for lib in libraries:
        lib = lib.rstrip(os.path.sep)
        if lib.endswith(FRAMEWORK_SUFFIX) and os.path.isabs(lib):
            res.extend(['-F' + os.path.dirname(lib), '-framework', os.path.basename(lib)[:-len(FRAMEWORK_SUFFIX)]])
        else:
            res.append(lib)
    return res


def link_check_cmd(compiler, src, exe, symbol, libraries, definitions=None, flags=None):
    """
    Compose compiler command for link check of specified symbol.

    :param compiler: compiler command, as a list (see get_compiler)
    :param src: path to C source file
    :param exe: path to executable to produce
    :param symbol: name of function to check
    :param libraries: list of libraries to link with
    :param definitions: list of compiler definitions (e.g. -DBLAS_USE_F2C)
    :param flags: list of additional linker flags
    """
    cmd = compiler + ['-DCHECK_FUNCTION_EXISTS=%s' % symbol]
    cmd.extend(definitions or [])
    cmd.extend([src, '-o', exe])
    cmd.extend(flags or [])
    cmd.extend(library_link_args(libraries))
    return cmd


def check_function_exists(cache, var, symbol, libraries, definitions=None, flags=None):
    """
    Check whether function with given name can be linked against specified libraries,
    and record the outcome in the cache.

    An outcome that is already recorded in the cache (positive or negative) is reused.

    :param cache: ProbeCache instance
    :param var: name of cache entry in which outcome of check is recorded
    :param symbol: name of function to check for
    :param libraries: list of libraries to link with
    :param definitions: list of compiler definitions to use
    :param flags: list of additional linker flags
    :return: True if the function could be linked, False otherwise
    """
    if var in cache:
        res = is_true(cache.get(var))
        _log.info("Using cached outcome of link check for %s (%s): %s", symbol, var, res)
        return res

    compiler = get_compiler()

    _log.info("Looking for %s (libraries: %s, flags: %s, definitions: %s)", symbol, libraries, flags, definitions)

    tmpdir = tempfile.mkdtemp(prefix='findblas-check-')
    try:
        src = os.path.join(tmpdir, CHECK_FUNCTION_EXISTS_SRC_NAME)
        write_file(src, CHECK_FUNCTION_EXISTS_SRC)
        exe = os.path.join(tmpdir, 'cfe')

        cmd = link_check_cmd(compiler, src, exe, symbol, libraries, definitions=definitions, flags=flags)
        try:
            cmd_res = run_shell_cmd(cmd, work_dir=tmpdir)
        except FindBlasError as err:
            raise FindBlasError("Failed to run link check for %s: %s", symbol, err,
                                exit_code=FindBlasExit.FAIL_LINK_CHECK)
    finally:
        remove_dir(tmpdir)

    res = cmd_res.exit_code == 0
    if res:
        _log.info("Looking for %s - found", symbol)
    else:
        _log.info("Looking for %s - not found", symbol)

    cache.set(var, res, typ=INTERNAL, help="Have function %s" % symbol, force=True)

    return res
