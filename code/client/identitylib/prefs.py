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
prefs.py

Preferences functions used by setmachinename.

Preferences are read with CFPreferences when the PyObjC Foundation bindings
are available, so they can be managed with a configuration profile. Without
them (for example when running the test suite on Linux) they are read
directly from the plist in /Library/Preferences.
"""

from xml.parsers.expat import ExpatError

from .constants import BUNDLE_ID, PLIST_PATH, SYSTEM_NAME_FIELDS
from .wrappers import readPlist, PlistReadError

FOUNDATION_SUPPORT = True
try:
    # PyLint cannot properly find names inside Cocoa libraries, so issues bogus
    # No name 'Foo' in module 'Bar' warnings. Disable them.
    # pylint: disable=E0611
    from Foundation import CFPreferencesAppSynchronize
    from Foundation import CFPreferencesAppValueIsForced
    from Foundation import CFPreferencesCopyAppValue
    # pylint: enable=E0611
except ImportError:
    # CoreFoundation/Foundation isn't available
    FOUNDATION_SUPPORT = False


DEFAULT_PREFS = {
    'AdminName': 'SecurityOps',
    'Departments': ['Dev', 'Ris', 'Mkt', 'Hr', 'Web3', 'Sec', 'Ops', 'CS',
                    'Fin'],
    'Fields': list(SYSTEM_NAME_FIELDS),
    'FieldStorePlugin': 'ScutilStore',
    'LogFile': '/Library/Logs/setmachinename.log',
    'LoggingLevel': 1,
    'LogToSyslog': False,
    'NetworkInterface': 'en0',
    'ReportDir': '/Library/Logs/setmachinename',
    'SecurityAgentPaths': ['/Applications/Falcon.app',
                           '/Library/CS/falconctl'],
    'WebhookURL': None,
}


if FOUNDATION_SUPPORT:
    def _read_pref(pref_name):
        """Since this uses CFPreferencesCopyAppValue, preferences can be
        defined several places. Precedence is:
            - MCX/Configuration Profile
            - /var/root/Library/Preferences/ByHost/<BUNDLE_ID>.XXXX.plist
            - /var/root/Library/Preferences/<BUNDLE_ID>.plist
            - /Library/Preferences/<BUNDLE_ID>.plist
        """
        return CFPreferencesCopyAppValue(pref_name, BUNDLE_ID)

    def _is_forced(pref_name):
        return CFPreferencesAppValueIsForced(pref_name, BUNDLE_ID)

    def reload_prefs():
        """Make sure we have the latest prefs. Call this if you have modified
        /Library/Preferences/<BUNDLE_ID>.plist directly"""
        CFPreferencesAppSynchronize(BUNDLE_ID)

else:
    def _read_pref(pref_name):
        """Returns a preference for pref_name. This is a fallback mechanism if
        CoreFoundation functions are not available"""
        if not hasattr(_read_pref, 'cache'):
            _read_pref.cache = None
        if _read_pref.cache is None:
            try:
                _read_pref.cache = readPlist(PLIST_PATH)
            except (IOError, OSError, ExpatError, PlistReadError):
                _read_pref.cache = {}
        return _read_pref.cache.get(pref_name)

    def _is_forced(dummy_pref_name):
        return False

    def reload_prefs():
        """Forget cached preferences so the plist is read again"""
        _read_pref.cache = None


def pref(pref_name):
    """Return a preference, falling back to DEFAULT_PREFS when it is not
    defined anywhere."""
    pref_value = _read_pref(pref_name)
    if pref_value is None:
        pref_value = DEFAULT_PREFS.get(pref_name)
    return pref_value


def get_config_level(pref_name, value):
    '''Returns a string indicating where the given preference is defined'''
    if value is None:
        return '[not set]'
    if _is_forced(pref_name):
        return '[MANAGED]'
    if _read_pref(pref_name) is None:
        return '[default]'
    return '[%s]' % PLIST_PATH


def print_config():
    '''Prints the current setmachinename configuration'''
    print('Current setmachinename configuration:')
    max_pref_name_len = max([len(pref_name) for pref_name in DEFAULT_PREFS])
    for pref_name in sorted(DEFAULT_PREFS):
        value = pref(pref_name)
        where = get_config_level(pref_name, value)
        repr_value = value
        if isinstance(value, str):
            repr_value = repr(value)
        elif value is not None and not isinstance(value, (bool, int)):
            repr_value = ', '.join([str(item) for item in value])
        print(('%' + str(max_pref_name_len) + 's: %5s %s ') % (
            pref_name, repr_value, where))


def pref_list(pref_name):
    '''Returns a list-valued preference as a plain Python list of str'''
    value = pref(pref_name) or []
    if isinstance(value, str):
        return value.split()
    return [str(item) for item in value]


if __name__ == '__main__':
    print('This is a library of support tools for setmachinename.')
