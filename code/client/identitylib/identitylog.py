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
identitylog.py

Logging functions for setmachinename.

Every line in LogFile carries a timestamp, the tag of the run that wrote it
(see begin_run()), and a level when it is anything but INFO, e.g.

  Mar 02 2025 10:14:07 +0100 [pid 4121 alice] WARNING: HostName reads ...

The same messages go to syslog, at the matching priority, once
configure_syslog() has been called.
"""

import codecs
import logging
import logging.handlers
import os
import time

from . import prefs

LOG_DATE_FORMAT = '%b %d %Y %H:%M:%S %z'
MAX_LOG_SIZE = 1000000
LOG_GENERATIONS = 4
SYSLOG_SOCKET = '/var/run/syslog'

LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
}

logger = logging.getLogger('setmachinename')
logger.addHandler(logging.NullHandler())
logger.propagate = False

# pylint: disable=invalid-name
_run_tag = ''
# pylint: enable=invalid-name


def logging_level():
    '''Returns the logging level, which might be defined badly by the admin'''
    try:
        return int(prefs.pref('LoggingLevel'))
    except (TypeError, ValueError):
        return 1


def begin_run(operator):
    '''Tags the lines logged from now on with our pid and the operator'''
    global _run_tag
    _run_tag = '[pid %s %s]' % (os.getpid(), operator or 'unknown')


def end_run():
    '''Stops tagging log lines'''
    global _run_tag
    _run_tag = ''


def format_line(msg, level='INFO'):
    '''Returns msg as it is written to LogFile, without the newline'''
    parts = [time.strftime(LOG_DATE_FORMAT)]
    if _run_tag:
        parts.append(_run_tag)
    if level != 'INFO':
        parts.append('%s:' % level)
    parts.append(msg)
    return ' '.join(parts)


def log(msg, level='INFO'):
    """Appends msg to LogFile and hands it to syslog, if configured.
    level is one of LEVELS."""
    logger.log(LEVELS.get(level, logging.INFO), msg)
    try:
        with codecs.open(prefs.pref('LogFile'), mode='a',
                         encoding='UTF-8') as fileobj:
            fileobj.write(format_line(msg, level) + '\n')
    except (OSError, IOError):
        pass


def configure_syslog():
    """Sends our log messages to syslog as well as to LogFile."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        syslog = logging.handlers.SysLogHandler(SYSLOG_SOCKET)
    except (OSError, IOError) as err:
        logger.addHandler(logging.NullHandler())
        log('LogToSyslog is enabled but %s is unavailable: %s'
            % (SYSLOG_SOCKET, err), 'WARNING')
        return
    syslog.setFormatter(logging.Formatter(
        'setmachinename[%(process)d]: %(levelname)s %(message)s'))
    logger.addHandler(syslog)


def rotate_main_log(max_size=MAX_LOG_SIZE, generations=LOG_GENERATIONS):
    """Once LogFile is bigger than max_size bytes, moves it to LogFile.0,
    shifting older copies up and dropping the one past generations."""
    logpath = prefs.pref('LogFile')
    try:
        if os.path.getsize(logpath) <= max_size:
            return
    except OSError:
        return
    try:
        for i in reversed(range(generations - 1)):
            older = '%s.%s' % (logpath, i)
            if os.path.exists(older):
                os.rename(older, '%s.%s' % (logpath, i + 1))
        os.rename(logpath, logpath + '.0')
    except OSError as err:
        log('Could not rotate %s: %s' % (logpath, err), 'WARNING')


if __name__ == '__main__':
    print('This is a library of support tools for setmachinename.')
