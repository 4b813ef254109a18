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
reports.py

Reporting functions. Each run records what it attempted and how it ended in
a plist under pref('ReportDir'); earlier reports are archived.
"""

import os
import sys
import time

from . import constants
from . import identitylog
from . import prefs
from .wrappers import readPlist, writePlist, PlistError


def format_time(timestamp=None):
    """Return timestamp as an ISO 8601 formatted string, in the current
    timezone.
    If timestamp isn't given the current time is used."""
    if timestamp is None:
        timestamp = time.time()
    return time.strftime('%Y-%m-%d %H:%M:%S %z', time.localtime(timestamp))


def printreportitem(label, value, indent=0):
    """Prints a report item in an 'attractive' way"""
    indentspace = '    '
    if value is None:
        print(indentspace*indent, '%s: !NONE!' % label)
    elif isinstance(value, (list, tuple)):
        if label:
            print(indentspace*indent, '%s:' % label)
        for index, item in enumerate(value, 1):
            printreportitem(index, item, indent+1)
    elif isinstance(value, dict):
        if label:
            print(indentspace*indent, '%s:' % label)
        for subkey in value.keys():
            printreportitem(subkey, value[subkey], indent+1)
    else:
        print(indentspace*indent, '%s: %s' % (label, value))


def printreport(reportdict):
    """Prints the report dictionary in a pretty(?) way"""
    for key in reportdict.keys():
        printreportitem(key, reportdict[key])


def report_path():
    """Path of the current report file"""
    return os.path.join(prefs.pref('ReportDir'), constants.REPORT_NAME)


def _warn(msg):
    """We can't use display module functions here because that would require
    circular imports. So a partial reimplementation."""
    print('WARNING: %s' % msg, file=sys.stderr)
    identitylog.log(msg, 'WARNING')


def savereport():
    """Save our report. Returns True if it was written."""
    reportdir = prefs.pref('ReportDir')
    if not os.path.isdir(reportdir):
        try:
            os.makedirs(reportdir)
        except (OSError, IOError) as err:
            _warn('Could not create report directory %s: %s'
                  % (reportdir, err))
            return False
    try:
        writePlist(report, report_path())
    except PlistError as err:
        _warn('Could not save report: %s' % err)
        return False
    return True


def readreport():
    """Read report data from file"""
    global report
    try:
        report = readPlist(report_path())
    except PlistError:
        report = {}


def archive_report():
    """Archive a report"""
    reportfile = report_path()
    if not os.path.exists(reportfile):
        return
    modtime = os.stat(reportfile).st_mtime
    formatstr = '%Y-%m-%d-%H%M%S'
    archivename = ('SetMachineNameReport-%s.plist'
                   % time.strftime(formatstr, time.localtime(modtime)))
    archivepath = os.path.join(prefs.pref('ReportDir'), 'Archives')
    if not os.path.exists(archivepath):
        try:
            os.mkdir(archivepath)
        except (OSError, IOError):
            _warn('Could not create report archive path.')
    try:
        os.rename(reportfile, os.path.join(archivepath, archivename))
    except (OSError, IOError):
        _warn('Could not archive report.')
    # now keep number of archived reports to 100 or fewer
    try:
        archiveitems = sorted(
            [item for item in os.listdir(archivepath)
             if item.startswith('SetMachineNameReport-')], reverse=True)
    except (OSError, IOError):
        return
    for item in archiveitems[100:]:
        itempath = os.path.join(archivepath, item)
        if os.path.isfile(itempath):
            try:
                os.unlink(itempath)
            except (OSError, IOError):
                _warn('Could not remove archive item %s' % item)


# module globals
# pylint: disable=invalid-name
report = {}
# pylint: enable=invalid-name


if __name__ == '__main__':
    print('This is a library of support tools for setmachinename.')
