# encoding: utf-8
#
# Copyright 2025 The setmachinename Authors.
#
# Licensed under the Apache License, Version 2.0 (the 'License');
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an 'AS IS' BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""
display.py

Console output for setmachinename. Everything shown is also logged;
warnings and errors are collected into the run report as well.

verbose  shows
   0     nothing (errors and warnings are still logged and reported)
   1     steps, info, warnings and errors
   2     + details
   3     + debug messages
"""

import sys
import warnings

from . import identitylog
from . import reports
from .wrappers import unicode_or_str


def _format(msg, args):
    """Fills in msg with args, making sure everything is str"""
    msg = unicode_or_str(msg)
    if args:
        try:
            msg = msg % tuple([unicode_or_str(arg) for arg in args])
        except TypeError:
            warnings.warn('Message "%s" does not take %d argument(s)'
                          % (msg, len(args)))
    return msg.rstrip()


def _show(text, min_verbosity, stream=None):
    stream = stream or sys.stdout
    if verbose >= min_verbosity:
        print(text, file=stream)
        stream.flush()


def _as_step(msg):
    if msg.endswith('.') or msg.endswith(u'…'):
        return msg
    return msg + '...'


def display_status_major(msg, *args):
    """A top-level step of the run"""
    msg = _format(msg, args)
    identitylog.log(msg)
    _show(_as_step(msg), 1)


def display_status_minor(msg, *args):
    """A step within the current major step, such as a transaction phase"""
    msg = _format(msg, args)
    identitylog.log(u'  ' + msg)
    _show(u'    ' + _as_step(msg), 1)


def display_info(msg, *args):
    msg = _format(msg, args)
    identitylog.log(u'    ' + msg)
    _show(u'    ' + msg, 1)


def display_detail(msg, *args):
    """Shown at verbose 2; logged when LoggingLevel is 1 or more"""
    msg = _format(msg, args)
    _show(u'    ' + msg, 2)
    if identitylog.logging_level() > 0:
        identitylog.log(u'    ' + msg)


def display_debug1(msg, *args):
    """Shown at verbose 3; logged when LoggingLevel is 2 or more"""
    msg = _format(msg, args)
    _show(u'    ' + msg, 3)
    if identitylog.logging_level() > 1:
        identitylog.log(msg, 'DEBUG')


def _problem(level, report_key, msg, args):
    msg = _format(msg, args)
    _show('%s: %s' % (level, msg), 1, sys.stderr)
    identitylog.log(msg, level)
    reports.report.setdefault(report_key, []).append(msg)


def display_warning(msg, *args):
    """Prints and logs a warning, and adds it to the report"""
    _problem('WARNING', 'Warnings', msg, args)


def display_error(msg, *args):
    _problem('ERROR', 'Errors', msg, args)


# module globals
# pylint: disable=invalid-name
verbose = 1
# pylint: enable=invalid-name


if __name__ == '__main__':
    print('This is a library of support tools for setmachinename.')
