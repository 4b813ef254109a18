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
info.py

Utilities that retrieve information from the current machine.
"""

import os

from . import constants
from . import display
from . import prefs
from . import utils
from .wrappers import readPlist, readPlistFromString, PlistReadError


def get_version():
    """Returns version of setmachinename, reading version.plist"""
    vers = "UNKNOWN"
    build = ""
    # find the identitylib directory, and the version file
    libdir = os.path.dirname(os.path.abspath(__file__))
    versionfile = os.path.join(libdir, "version.plist")
    if os.path.exists(versionfile):
        try:
            vers_plist = readPlist(versionfile)
        except PlistReadError:
            pass
        else:
            try:
                vers = vers_plist['CFBundleShortVersionString']
                build = vers_plist['BuildNumber']
            except KeyError:
                pass
    if build:
        vers = vers + "." + build
    return vers


def get_sp_data(data_type):
    '''Uses system profiler to get info of data_type for this machine'''
    try:
        dummy_returncode, output, dummy_err = utils.run_command(
            [constants.SYSTEM_PROFILER, data_type, '-xml'])
        plist = readPlistFromString(output.encode('UTF-8'))
        # system_profiler xml is an array
        sp_dict = plist[0]
        items = sp_dict['_items']
        return items[0]
    except (utils.CommandError, PlistReadError, IndexError, KeyError,
            TypeError) as err:
        display.display_debug1(
            'Could not get %s from system_profiler: %s', data_type, err)
        return {}


def get_hardware_info():
    '''Uses system profiler to get hardware info for this machine'''
    return get_sp_data('SPHardwareDataType')


def device_model():
    '''Returns the marketing model name, like "MacBookPro", with
    whitespace removed, or "" if it can't be determined'''
    model = get_hardware_info().get('machine_name') or ''
    return ''.join(model.split())


def get_ip_address(interface=None):
    '''Returns the IPv4 address of interface, or "" if it has none'''
    interface = interface or prefs.pref('NetworkInterface')
    try:
        returncode, output, dummy_err = utils.run_command(
            [constants.IPCONFIG, 'getifaddr', interface])
    except utils.CommandError:
        return ''
    if returncode:
        return ''
    return output.strip()


def security_agent_installed(paths=None):
    '''Returns True if any of the security agent paths exists'''
    if paths is None:
        paths = prefs.pref_list('SecurityAgentPaths')
    return any([os.path.exists(path) for path in paths])


def machine_facts():
    """Facts reported alongside a name change"""
    return {
        'ip_address': get_ip_address(),
        'security_agent_installed': security_agent_installed(),
    }


if __name__ == '__main__':
    print('This is a library of support tools for setmachinename.')
