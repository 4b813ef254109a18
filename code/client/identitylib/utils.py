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
utils

Common utility functions used throughout setmachinename.

Note: this module should be 100% free of ObjC-dependent Python imports.
"""

import subprocess


class Error(Exception):
    """Class for domain specific exceptions."""


class CommandError(Error):
    """There was an error running an external command."""


def run_command(cmd, stdin_data=None):
    """Run a command and return its exit status and output.

    Args:
      cmd: list, the command and its arguments.
      stdin_data: optional bytes to feed to the command.
    Returns:
      Tuple. (integer exit status, str stdout, str stderr).
    Raises:
      CommandError: the command could not be started.
    """
    try:
        proc = subprocess.Popen(cmd, shell=False,
                                stdin=subprocess.PIPE,
                                stdout=subprocess.PIPE,
                                stderr=subprocess.PIPE)
    except (OSError, IOError) as err:
        raise CommandError(
            u'Error %s when attempting to run %s' % (err, cmd[0]))
    (stdout, stderr) = proc.communicate(stdin_data)
    return (proc.returncode, stdout.decode('UTF-8', 'replace'),
            stderr.decode('UTF-8', 'replace'))


if __name__ == '__main__':
    print('This is a library of support tools for setmachinename.')
