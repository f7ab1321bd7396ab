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
Tools to run commands.
"""
import locale
import os
import subprocess
from collections import namedtuple

from findblas.base import fancylogger
from findblas.tools.build_log import FindBlasError


_log = fancylogger.getLogger('run')


RunShellCmdResult = namedtuple('RunShellCmdResult', ('cmd', 'exit_code', 'output', 'work_dir'))
RunShellCmdResult.__doc__ = """A namedtuple that represents the result of a call to run_shell_cmd,
with the following fields:
- cmd: the command that was executed (as a string);
- exit_code: the exit code of the command (zero if it was successful, non-zero if not);
- output: output of the command (stdout+stderr combined);
- work_dir: the working directory of the command;
"""


def run_shell_cmd(cmd, work_dir=None):
    """
    Run specified command (a list of arguments, no shell is involved), and capture output + exit code.
    A non-zero exit code is not considered to be an error, it is up to the caller to check it.

    :param cmd: command to run, as a list of arguments
    :param work_dir: working directory to run command in (current working directory if None)
    """
    if not isinstance(cmd, list):
        raise FindBlasError("Command to run should be a list of arguments, found %s: %s", type(cmd), cmd)

    cmd_str = ' '.join(cmd)
    if work_dir is None:
        work_dir = os.getcwd()

    _log.info("Running command '%s' in %s", cmd_str, work_dir)

    try:
        proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, stdin=subprocess.DEVNULL,
                              cwd=work_dir, check=False)
    except OSError as err:
        raise FindBlasError("Failed to run command '%s': %s", cmd_str, err)

    # non-decodable characters are dropped from the output
    output = proc.stdout.decode(locale.getpreferredencoding(False), 'ignore')
    res = RunShellCmdResult(cmd=cmd_str, exit_code=proc.returncode, output=output, work_dir=work_dir)

    _log.info("Output of '%s ...' command:\n%s", os.path.basename(cmd[0]), res.output)
    if res.exit_code == 0:
        _log.info("Command completed successfully: %s", cmd_str)
    else:
        _log.warning("Command failed (exit code %s, see output above): %s", res.exit_code, cmd_str)

    return res
