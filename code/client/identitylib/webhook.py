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
webhook.py

Tells the admins about a name change by POSTing a JSON record to a webhook.

Delivery is fire-and-forget: send_change_record() never raises, and its
outcome has no bearing on the transaction result already returned.
"""

import json
import os
import tempfile

from . import constants
from . import display
from . import prefs
from . import reports
from . import transaction
from . import utils

COLOR_OK = '#36a64f'
COLOR_FAILED = '#d9534f'


class CurlError(utils.Error):
    '''Error for curl operations'''
    pass


def build_change_record(result, operator, department=None,
                        previous_value=None, facts=None):
    '''Returns a dict describing an attempted name change.

    previous_value defaults to the snapshot value of the first field.
    facts is a dict like info.machine_facts() returns.'''
    if previous_value is None:
        previous_value = ''
        if result.snapshot:
            previous_value = result.snapshot[0][1]
    facts = facts or {}
    record = {
        'operator': operator,
        'department': department or '',
        'previous_value': previous_value,
        'attempted_value': result.desired_value or '',
        'outcome': result.status,
        'timestamp': reports.format_time(),
        'security_agent_installed': bool(
            facts.get('security_agent_installed')),
        'ip_address': facts.get('ip_address') or '',
    }
    if result.failed_field:
        record['failed_field'] = result.failed_field
    if result.error:
        record['error'] = result.error
    if result.rolled_back:
        record['fully_restored'] = result.fully_restored
        record['restore_failures'] = [
            field for (field, dummy) in result.restore_failures]
    return record


def format_payload(record):
    '''Returns the webhook body for record as a JSON str'''
    if record['outcome'] == transaction.COMMITTED:
        color = COLOR_OK
    else:
        color = COLOR_FAILED
    if record['security_agent_installed']:
        agent_status = 'installed'
    else:
        agent_status = 'not installed'
    items = [
        ('Operator', record['operator']),
        ('Department', record['department']),
        ('Previous name', record['previous_value']),
        ('New name', record['attempted_value']),
        ('Outcome', record['outcome']),
    ]
    if 'failed_field' in record:
        items.append(('Failed field', record['failed_field']))
    if record.get('restore_failures'):
        items.append(('Not restored', ', '.join(record['restore_failures'])))
    items.extend([
        ('Security agent', agent_status),
        ('IP address', record['ip_address'] or 'no IP'),
        ('Time', record['timestamp']),
    ])
    attachments = [{'color': color, 'title': 'Machine name update'}]
    attachments.extend([
        {'color': color, 'title': title, 'text': text}
        for (title, text) in items])
    return json.dumps({'attachments': attachments}, ensure_ascii=False)


def _write_directives(url):
    '''Writes a curl config file for POSTing JSON to url.
    Returns its path.'''
    # we use a config/directive file to avoid having the url show
    # up in a process listing
    fileref, directivepath = tempfile.mkstemp()
    with os.fdopen(fileref, 'w') as fileobj:
        print('silent', file=fileobj)         # no progress meter
        print('show-error', file=fileobj)     # print error msg to stderr
        print('fail', file=fileobj)           # throw error if request fails
        print('location', file=fileobj)       # follow redirects
        print('max-time = 30', file=fileobj)
        print('request = POST', file=fileobj)
        print('header = "Content-Type: application/json"', file=fileobj)
        print('url = "%s"' % url, file=fileobj)
    return directivepath


def _curl_post(url, body):
    '''Use curl to POST body as JSON to url. Raises CurlError.'''
    temp_paths = []
    try:
        temp_paths.append(_write_directives(url))
        fileref, contentpath = tempfile.mkstemp()
        temp_paths.append(contentpath)
        with os.fdopen(fileref, 'wb') as fileobj:
            fileobj.write(body.encode('UTF-8'))
        cmd = [constants.CURL, '-q', '--config', temp_paths[0],
               '--data-binary', '@%s' % contentpath, '-o', '/dev/null']
        returncode, dummy_out, err = utils.run_command(cmd)
    except utils.CommandError as cmderr:
        raise CurlError(str(cmderr))
    except (OSError, IOError) as oserr:
        raise CurlError('could not prepare request: %s' % oserr)
    finally:
        for path in temp_paths:
            try:
                os.unlink(path)
            except OSError:
                pass
    if returncode:
        raise CurlError('curl exited %s: %s' % (returncode, err.strip()))


def send_change_record(record, url=None):
    '''POSTs record to url (default: pref('WebhookURL')).
    Returns True if it was delivered.'''
    url = url or prefs.pref('WebhookURL')
    if not url:
        display.display_detail('No WebhookURL configured; not reporting.')
        return False
    try:
        _curl_post(url, format_payload(record))
    except CurlError as err:
        display.display_warning('Could not send change notification: %s', err)
        return False
    display.display_detail('Change notification sent.')
    return True
