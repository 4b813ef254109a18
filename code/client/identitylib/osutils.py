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
osutils.py

Common functions for inspecting the running system.
"""

import os

from . import utils

# users that can be at the console without being a person
USERS_TO_IGNORE = ['root', 'loginwindow', '_mbsetupuser']


def getconsoleuser():
    """Return console user"""
    # PyLint cannot properly find names inside Cocoa libraries, so issues bogus
    # No name 'Foo' in module 'Bar' warnings. Disable them.
    # pylint: disable=E0611,import-outside-toplevel
    from SystemConfiguration import SCDynamicStoreCopyConsoleUser
    # pylint: enable=E0611,import-outside-toplevel
    cfuser = SCDynamicStoreCopyConsoleUser(None, None, None)
    return cfuser[0]


def operator_name():
    """Returns the name of the person running us: the console user, or the
    user that invoked sudo if nobody is at the console."""
    user = getconsoleuser()
    if user and user not in USERS_TO_IGNORE:
        return str(user)
    return os.environ.get('SUDO_USER') or 'root'


def python_script_running(scriptname):
    """Returns Process ID for a running python script, other than us"""
    try:
        dummy_returncode, out, dummy_err = utils.run_command(
            ['/bin/ps', '-eo', 'pid=,command='])
    except utils.CommandError:
        return 0
    mypid = os.getpid()
    for line in out.splitlines():
        try:
            (pid, process) = line.split(None, 1)
        except ValueError:
            # funky process line, so we'll skip it
            continue
        args = process.split()
        try:
            # first look for Python processes
            if (args[0].find('MacOS/Python') != -1 or
                    args[0].find('python') != -1):
                # look for first argument being scriptname
                if args[1].find(scriptname) != -1:
                    try:
                        if int(pid) != int(mypid):
                            return pid
                    except ValueError:
                        # pid must have some funky characters
                        pass
        except IndexError:
            pass
    # if we get here we didn't find a Python script with scriptname
    # (other than ourselves)
    return 0


if __name__ == '__main__':
    print('This is a library of support tools for setmachinename.')
