import unittest

from testfixtures import compare

from ecsmanage.core.models import Service
from ecsmanage.core.test.fakes import service_data
from ecsmanage.exceptions import EcsManageAppError
from ecsmanage.renderers.table import TableRenderer


class TestTableRenderer_get_value(unittest.TestCase):

    def setUp(self):
        self.service = Service(service_data('web', cluster='prod', desired=3, running=1))

    def test_attribute(self):
        renderer = TableRenderer({'Service': 'name'})
        compare(renderer.get_value(self.service, 'name'), 'web')

    def test_render_for_display_key(self):
        renderer = TableRenderer({'Status': 'status'})
        compare(renderer.get_value(self.service, 'status'), 'ACTIVE')

    def test_dict(self):
        renderer = TableRenderer({'Name': 'name'})
        compare(renderer.get_value({'name': 'foo'}, 'name'), 'foo')

    def test_default(self):
        column = {'key': 'nope', 'default': '-'}
        renderer = TableRenderer({'Nope': column})
        compare(renderer.get_value(self.service, column), '-')

    def test_missing_without_default_raises(self):
        renderer = TableRenderer({'Nope': 'nope'})
        with self.assertRaises(EcsManageAppError):
            renderer.get_value(self.service, 'nope')


class TestTableRenderer_render(unittest.TestCase):

    def setUp(self):
        self.rows = [
            {'name': 'worker', 'count': 1},
            {'name': 'api', 'count': 3},
            {'name': 'web', 'count': 2},
        ]

    def test_ordering(self):
        renderer = TableRenderer({'Name': 'name', 'D': 'count'}, ordering='Name', show_headers=False)
        lines = renderer.render(self.rows).splitlines()
        compare([line.split()[0] for line in lines if line.strip() and not line.startswith('-')],
                ['api', 'web', 'worker'])

    def test_reverse_ordering(self):
        renderer = TableRenderer({'Name': 'name', 'D': 'count'}, ordering='-D', show_headers=False)
        lines = renderer.render(self.rows).splitlines()
        compare([line.split()[0] for line in lines if line.strip() and not line.startswith('-')],
                ['api', 'web', 'worker'])

    def test_headers(self):
        renderer = TableRenderer({'Name': 'name', 'D': 'count'})
        first = renderer.render(self.rows).splitlines()[0]
        self.assertIn('Name', first)
        self.assertIn('D', first)

    def test_columns_must_be_a_dict(self):
        with self.assertRaises(EcsManageAppError):
            TableRenderer(['name'])
