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
constants.py

Commonly used constants
"""

# NOTE: it's very important that defined exit codes are never changed!
EXIT_STATUS_SUCCESS = 0
# Transaction outcome exit codes.
EXIT_STATUS_ROLLED_BACK = 1
EXIT_STATUS_RESTORE_FAILED = 2
# User related exit codes.
EXIT_STATUS_INVALID_PARAMETERS = 200
EXIT_STATUS_ROOT_REQUIRED = 201
# Store related exit codes.
EXIT_STATUS_BACKUP_FAILED = 202
EXIT_STATUS_ALREADY_RUNNING = 203

BUNDLE_ID = 'com.github.setmachinename'
PLIST_PATH = '/Library/Preferences/' + BUNDLE_ID + '.plist'

# the three name records macOS keeps for a machine
COMPUTER_NAME = 'ComputerName'
HOST_NAME = 'HostName'
LOCAL_HOST_NAME = 'LocalHostName'
SYSTEM_NAME_FIELDS = [COMPUTER_NAME, HOST_NAME, LOCAL_HOST_NAME]

SCUTIL = '/usr/sbin/scutil'
CURL = '/usr/bin/curl'
SYSTEM_PROFILER = '/usr/sbin/system_profiler'
IPCONFIG = '/usr/sbin/ipconfig'

REPORT_NAME = 'SetMachineNameReport.plist'


if __name__ == '__main__':
    print('This is a library of support tools for setmachinename.')
