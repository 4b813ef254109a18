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
setmachinename

Sets ComputerName, HostName and LocalHostName to one name of the form
<department>-<user>-<model>, rolling all of them back if any one fails to
take, and reports the outcome to the admins' webhook.
"""
# pylint: disable=consider-using-f-string

import optparse
import os
import signal
import sys

from identitylib import constants
from identitylib import display
from identitylib import fieldstore
from identitylib import identitylog
from identitylib import info
from identitylib import naming
from identitylib import osutils
from identitylib import prefs
from identitylib import reports
from identitylib import transaction
from identitylib import webhook
from identitylib.wrappers import get_input


def signal_handler(signum, _frame):
    """Exit on SIGTERM. Not called while the name records are being changed,
    see apply_uninterrupted()"""
    if signum == signal.SIGTERM:
        sys.exit()


def get_department(options, departments):
    """Returns the department from options, asking for it if needed"""
    department = options.department
    if not department:
        department = get_input(
            'Department (%s): ' % ', '.join(departments)).strip()
    return naming.validate_department(department, departments)


def desired_name(options):
    """Returns (name, department): the validated machine name to set and
    the department it was composed for, if any.
    Raises naming.InvalidNameError."""
    department = None
    if options.name:
        name = options.name.strip()
    else:
        department = get_department(options, prefs.pref_list('Departments'))
        user = options.user or osutils.operator_name()
        model = options.model or info.device_model()
        if not model:
            display.display_warning(
                'Could not determine the hardware model; leaving it out.')
        name = naming.compose_name(department, user, model)
    naming.validate_name(name)
    return name, department


def apply_uninterrupted(store, fields, new_name):
    """transaction.apply(), with SIGTERM held until it returns"""
    signal.pthread_sigmask(signal.SIG_BLOCK, [signal.SIGTERM])
    try:
        return transaction.apply(store, fields, new_name)
    finally:
        signal.pthread_sigmask(signal.SIG_UNBLOCK, [signal.SIGTERM])


def confirm(prompt):
    """Asks a yes/no question; only y or yes counts as yes"""
    answer = get_input(prompt)
    return answer.strip().lower() in ('y', 'yes')


def current_value(store, field):
    """Returns field's current value for display, or 'Unknown'"""
    try:
        return store.get(field) or 'Unknown'
    except fieldstore.FieldStoreError:
        return 'Unknown'


def report_result(result):
    """Tells the operator how the transaction ended"""
    if result.committed:
        display.display_status_major(
            '%s now read "%s".', ', '.join(result.fields),
            result.desired_value)
        return
    if result.status == transaction.INVALID_INPUT:
        display.display_error('Nothing was changed: %s.', result.error)
        return
    if result.status == transaction.BACKUP_FAILED:
        display.display_error(
            'Nothing was changed: could not read %s: %s',
            result.failed_field, result.error)
        return
    display.display_error(
        'Setting %s failed: %s', result.failed_field, result.error)
    if result.fully_restored:
        display.display_status_major(
            'All name records were restored to their previous values.')
        return
    previous = result.previous_values
    for field, error in result.restore_failures:
        display.display_error(
            '%s could NOT be restored (%s). Set it back to "%s" by hand.',
            field, error, previous.get(field, ''))


def exit_status_for(result):
    """Maps a TransactionResult to our exit status"""
    if result.committed:
        return constants.EXIT_STATUS_SUCCESS
    if result.status == transaction.INVALID_INPUT:
        return constants.EXIT_STATUS_INVALID_PARAMETERS
    if result.status == transaction.BACKUP_FAILED:
        return constants.EXIT_STATUS_BACKUP_FAILED
    if result.restore_failures:
        return constants.EXIT_STATUS_RESTORE_FAILED
    return constants.EXIT_STATUS_ROLLED_BACK


def save_report(result, operator, department):
    """Archives the previous report and saves this run's"""
    reports.archive_report()
    reports.report['EndTime'] = reports.format_time()
    reports.report['Operator'] = operator
    reports.report['Department'] = department or ''
    reports.report['Result'] = result.as_dict()
    reports.savereport()


def build_parser(progname):
    """Returns our option parser"""
    parser = optparse.OptionParser()
    parser.set_usage('Usage: %s [options]' % progname)
    parser.add_option('--version', '-V', action='store_true',
                      help='Print the version and exit.')

    name_options = optparse.OptionGroup(
        parser, 'Name Options', 'Options that control the new machine name')
    name_options.add_option(
        '--department', '-d',
        help='Department prefix. Must be one of the configured Departments. '
        'Asked for if not given.')
    name_options.add_option(
        '--user', '-u',
        help='User name part of the machine name. Defaults to the console '
        'user.')
    name_options.add_option(
        '--model',
        help='Model part of the machine name. Defaults to the hardware model '
        'name reported by system_profiler.')
    name_options.add_option(
        '--name',
        help='Use this exact machine name instead of composing one.')
    parser.add_option_group(name_options)

    other_options = optparse.OptionGroup(
        parser, 'Other Options')
    other_options.add_option(
        '--yes', '-y', action='store_true',
        help='Do not ask for confirmation.')
    other_options.add_option(
        '--no-report', action='store_true',
        help='Do not notify the webhook.')
    other_options.add_option(
        '--show-config', action='store_true',
        help='Print the current configuration and exit.')
    other_options.add_option(
        '--show-report', action='store_true',
        help='Print the report of the last run and exit.')
    other_options.add_option(
        '--verbose', '-v', action='count', default=1,
        help='More verbose output. May be specified multiple times.')
    other_options.add_option(
        '--quiet', '-q', action='store_true',
        help='Quiet mode. Logs messages, but nothing to stdout. --verbose is '
        'ignored if --quiet is used.')
    parser.add_option_group(other_options)
    return parser


def main(argv=None):
    """Main"""
    progname = 'setmachinename'

    # install handler for SIGTERM
    signal.signal(signal.SIGTERM, signal_handler)

    parser = build_parser(progname)
    options, dummy_arguments = parser.parse_args(argv)

    if options.version:
        print(info.get_version())
        return constants.EXIT_STATUS_SUCCESS

    if options.show_config:
        prefs.print_config()
        return constants.EXIT_STATUS_SUCCESS

    if options.show_report:
        reports.readreport()
        if not reports.report:
            print('No report found at %s' % reports.report_path())
        reports.printreport(reports.report)
        return constants.EXIT_STATUS_SUCCESS

    if options.quiet:
        display.verbose = 0
    else:
        display.verbose = options.verbose

    # check to see if we're root
    if os.geteuid() != 0:
        print('You must run this as root!', file=sys.stderr)
        return constants.EXIT_STATUS_ROOT_REQUIRED

    if prefs.pref('LogToSyslog'):
        identitylog.configure_syslog()
    identitylog.rotate_main_log()

    # check to see if another instance of this script is running
    myname = os.path.basename(sys.argv[0])
    other_pid = osutils.python_script_running(myname)
    if other_pid:
        identitylog.log('Another instance of %s is running as pid %s.'
                        % (progname, other_pid))
        print('Another instance of %s is running. Exiting.' % progname,
              file=sys.stderr)
        return constants.EXIT_STATUS_ALREADY_RUNNING

    operator = osutils.operator_name()
    identitylog.begin_run(operator)
    identitylog.log('### Beginning %s run ###' % progname)
    reports.report = {'StartTime': reports.format_time()}

    try:
        store = fieldstore.connect(prefs.pref('FieldStorePlugin'))
        new_name, department = desired_name(options)
    except (fieldstore.FieldStoreError, naming.InvalidNameError) as err:
        display.display_error(str(err))
        return constants.EXIT_STATUS_INVALID_PARAMETERS

    fields = prefs.pref_list('Fields')
    old_name = current_value(store, fields[0]) if fields else 'Unknown'

    print('')
    print('Summary:')
    if department:
        print('    Department:    %s' % department)
    print('    Current name:  %s' % old_name)
    print('    New name:      %s' % new_name)
    print('    Records:       %s' % ', '.join(fields))
    if not options.yes and not confirm('Apply this change? (y/n): '):
        print('Cancelled. Nothing was changed.')
        identitylog.log('Cancelled by operator.')
        return constants.EXIT_STATUS_SUCCESS

    display.display_status_major('Setting machine name to %s', new_name)
    result = apply_uninterrupted(store, fields, new_name)
    report_result(result)
    save_report(result, operator, department)

    if not options.no_report:
        record = webhook.build_change_record(
            result, operator, department=department,
            previous_value=old_name,
            facts=info.machine_facts())
        if webhook.send_change_record(record):
            display.display_info(
                'Result sent to %s.', prefs.pref('AdminName'))

    identitylog.log('### Ending %s run ###' % progname)
    identitylog.end_run()
    return exit_status_for(result)


if __name__ == '__main__':
    sys.exit(main())
