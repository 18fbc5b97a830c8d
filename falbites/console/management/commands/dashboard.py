"""
Drive the admin or vendor dashboard from the command line.

Usage:
    python manage.py dashboard login --phone 9876543210 --password secret
    python manage.py dashboard routes
    python manage.py dashboard list vendors --search acme
    python manage.py dashboard create brands name=Amul --file image=./amul.png
    python manage.py dashboard update vendors 7 brandName="Acme Foods"
    python manage.py dashboard delete reviews 12
    python manage.py dashboard --app vendor login --username acme --password secret
"""
import getpass
import json

from django.core.management.base import BaseCommand, CommandError

from falbites.console.api import ApiClient
from falbites.console.forms import upload_from_path
from falbites.console.pages.base import lookup
from falbites.console.session import ADMIN, VENDOR
from falbites.console.shell import Shell, UnknownRoute
from falbites.console.tables import render_record, render_table


def parse_assignments(pairs):
    """``name=value`` pairs; values that parse as JSON (numbers, lists, booleans) are decoded"""
    data = {}
    for pair in pairs:
        if '=' not in pair:
            raise CommandError(f"Expected field=value, got '{pair}'")
        name, value = pair.split('=', 1)
        try:
            data[name] = json.loads(value)
        except ValueError:
            data[name] = value
    return data


def parse_files(pairs):
    files = {}
    for pair in pairs or []:
        if '=' not in pair:
            raise CommandError(f"Expected field=path, got '{pair}'")
        name, path = pair.split('=', 1)
        try:
            files.setdefault(name, []).append(upload_from_path(path))
        except OSError as exc:
            raise CommandError(f"Cannot read {path}: {exc}")
    return files


class Command(BaseCommand):
    help = 'Admin and vendor dashboard client'

    def add_arguments(self, parser):
        parser.add_argument('--app', choices=[ADMIN, VENDOR], default=ADMIN, help='Which dashboard to drive')
        parser.add_argument('--api-url', help='API base URL (defaults to FALBITES_API_URL)')

        actions = parser.add_subparsers(dest='action', required=True)

        login = actions.add_parser('login', help='Sign in and remember the session')
        login.add_argument('--phone', help='Admin phone number')
        login.add_argument('--username', help='Vendor username')
        login.add_argument('--password')

        actions.add_parser('logout', help='Forget the stored session')
        actions.add_parser('whoami', help='Show the signed-in account')
        actions.add_parser('routes', help='List the pages of the dashboard')

        listing = actions.add_parser('list', help='List the records of a page')
        listing.add_argument('route')
        listing.add_argument('--search', default='', help='Search query')
        listing.add_argument('--columns', help='Comma separated (dotted) fields to show')

        show = actions.add_parser('show', help='Show one record of a page')
        show.add_argument('route')
        show.add_argument('id')

        delete = actions.add_parser('delete', help='Delete one record')
        delete.add_argument('route')
        delete.add_argument('id')

        create = actions.add_parser('create', help='Create a record from field=value pairs')
        create.add_argument('route')
        create.add_argument('fields', nargs='*')
        create.add_argument('--file', action='append', dest='uploads', help='field=path of a file to upload')

        update = actions.add_parser('update', help='Update a record from field=value pairs')
        update.add_argument('route')
        update.add_argument('id')
        update.add_argument('fields', nargs='*')
        update.add_argument('--file', action='append', dest='uploads', help='field=path of a file to upload')

    def handle(self, *args, **options):
        self.shell = Shell(options['app'], client=ApiClient(base_url=options.get('api_url')))
        action = options['action']
        getattr(self, f"handle_{action}")(options)

    # Helpers

    def report(self, controller):
        """Raise with the controller's banner and form errors when the last operation failed"""
        lines = []
        if controller.form is not None and controller.form.errors:
            for field, messages in controller.form.errors.items():
                lines.append(f"  {field}: {' '.join(messages)}")
        message = controller.banner or 'Validation failed'
        raise CommandError('\n'.join([message] + lines))

    def open_page(self, route):
        if not self.shell.session.is_authenticated:
            raise CommandError('Not logged in. Run "dashboard login" first.')
        try:
            self.shell.resolve(route)
        except UnknownRoute as exc:
            raise CommandError(str(exc))
        page = self.shell.navigate(route)
        if page.banner:
            self.report(page)
        return page

    def find(self, page, entity_id):
        for item in page.items:
            if str(page.entity_id(item)) == str(entity_id):
                return item
        return None

    # Actions

    def handle_login(self, options):
        if self.shell.session.is_authenticated:
            raise CommandError(f"Already logged in as {self.shell.session.display_name}; log out first.")
        password = options['password'] or getpass.getpass('Password: ')
        if self.shell.app == ADMIN:
            data = {'phone': options['phone'] or input('Phone: '), 'password': password}
        else:
            data = {'username': options['username'] or input('Username: '), 'password': password}

        page = self.shell.login(data)
        if not self.shell.session.is_authenticated:
            self.report(page)
        self.stdout.write(self.style.SUCCESS(f"Logged in as {self.shell.session.display_name}"))

    def handle_logout(self, options):
        if not self.shell.session.is_authenticated:
            raise CommandError('Not logged in.')
        self.shell.logout()
        self.stdout.write(self.style.SUCCESS('Logged out'))

    def handle_whoami(self, options):
        session = self.shell.session
        if not session.is_authenticated:
            self.stdout.write('anonymous')
            return
        self.stdout.write(f"{session.display_name} ({session.app})")
        self.stdout.write(render_record(session.profile))

    def handle_routes(self, options):
        for path, title, _active in self.shell.sidebar():
            self.stdout.write(f"{path:<34}{title}")

    def handle_list(self, options):
        page = self.open_page(options['route'])
        if options['search']:
            page.search(options['search'])
            page.flush()
            if page.banner:
                self.report(page)
        items = page.visible_items()
        columns = options['columns'].split(',') if options['columns'] else None
        self.stdout.write(render_table(items, columns))
        self.stdout.write(f"\n{len(items)} record(s)")

    def handle_show(self, options):
        page = self.open_page(options['route'])
        item = self.find(page, options['id'])
        if item is None:
            raise CommandError(f"No record {options['id']} on {options['route']}")
        self.stdout.write(render_record(item))

    def handle_delete(self, options):
        page = self.open_page(options['route'])
        if not page.delete(options['id']):
            self.report(page)
        self.stdout.write(self.style.SUCCESS(page.notice or 'Deleted'))

    def handle_create(self, options):
        page = self.open_page(options['route'])
        if page.form_class is None or not page.allow_create:
            raise CommandError(f"{page.title} does not support creating records")
        page.open_modal()
        if not page.submit(parse_assignments(options['fields']), parse_files(options['uploads'])):
            self.report(page)
        self.stdout.write(self.style.SUCCESS(page.notice or 'Created'))
        if page.items:
            self.stdout.write(render_record(page.items[0]))

    def handle_update(self, options):
        page = self.open_page(options['route'])
        if page.form_class is None or not page.allow_update:
            raise CommandError(f"{page.title} does not support editing records")
        entity = self.find(page, options['id']) or {page.id_field: options['id']}

        # Start from the record's current values so only the given fields change;
        # populated references go back as their ids
        data = {}
        for name in page.form_class.base_fields:
            value = lookup(entity, name)
            if isinstance(value, dict):
                value = value.get('_id')
            if value is not None and name not in page.form_class.file_fields:
                data[name] = value
        data.update(parse_assignments(options['fields']))

        page.open_modal(entity)
        if not page.submit(data, parse_files(options['uploads'])):
            self.report(page)
        self.stdout.write(self.style.SUCCESS(page.notice or 'Updated'))
        updated = self.find(page, options['id'])
        if updated is not None:
            self.stdout.write(render_record(updated))
