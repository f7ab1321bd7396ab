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
Main entry point for findblas: locate a library with BLAS API, and report the resulting configuration.
"""
import sys

from findblas.framework.finder import BlasFinder
from findblas.tools.build_log import FindBlasError, print_error, stop_logging
from findblas.tools.config import OUTPUT_FORMAT_SUMMARY
from findblas.tools.export import export_configuration
from findblas.tools.filetools import remove_file
from findblas.tools.options import set_up_configuration
from findblas.tools.output import print_probe_summary


_log = None


def cleanup(logfile, testing):
    """Remove temporary log file (unless testing)."""
    if not testing and logfile is not None:
        remove_file(logfile)


def main(args=None, logfile=None, testing=False):
    """
    Main function: parse command line options, and act accordingly.
    :param args: command line arguments to use
    :param logfile: log file to use
    :param testing: enable testing mode

    :return: BlasConfiguration instance
    """
    fb_go, (log, logfile) = set_up_configuration(args=args, logfile=logfile, testing=testing)
    options = fb_go.options

    global _log
    _log = log

    summary = options.output_format == OUTPUT_FORMAT_SUMMARY

    # don't mix messages with configuration printed in a machine-readable format
    finder = BlasFinder(stderr=not summary and not options.output_file)
    config = finder.find()

    if summary and not options.quiet and finder.attempts:
        print_probe_summary(finder.attempts)

    export_configuration(config, output_format=options.output_format, output_file=options.output_file)

    _log.info("BLAS configuration: %s", config)

    stop_logging(logfile, logtostdout=options.logtostdout)
    # only clean up temporary log file, never a log file that was specified explicitly
    if not options.logfile:
        cleanup(logfile, testing)

    return config


def main_with_exit(args=None):
    """Run main function, and exit with the exit code that corresponds to the error that occurred (if any)."""
    try:
        main(args=args)
    except FindBlasError as err:
        print_error(err.msg, exit_code=err.exit_code)
    except KeyboardInterrupt as err:
        print_error("Cancelled by user: %s" % err)

    sys.exit(0)


if __name__ == "__main__":
    main_with_exit()
