import unittest

from botocore.exceptions import ClientError
from mock import Mock
from testfixtures import LogCapture, compare

from ecsmanage.core.models import Service, ServiceManager
from ecsmanage.core.retry import RetryPolicy

from .fakes import FakeControlPlane, service_data


class TestServiceManager_list_names(unittest.TestCase):

    def setUp(self):
        self.names = ['svc-{:02d}'.format(i) for i in range(25)]
        self.client = FakeControlPlane(
            clusters={'foo': [service_data(name, cluster='foo') for name in self.names]},
            page_size=10,
        )
        self.manager = ServiceManager(self.client, RetryPolicy(sleep=Mock()))

    def test_follows_every_page_in_order(self):
        compare(self.manager.list_names('foo'), self.names)

    def test_token_handling(self):
        self.manager.list_names('foo')
        compare(
            self.client.calls_to('list_services'),
            [('foo', None), ('foo', '10'), ('foo', '20')]
        )

    def test_empty_cluster(self):
        self.client.clusters['empty'] = []
        compare(self.manager.list_names('empty'), [])

    def test_throttled_page_is_retried(self):
        self.client.throttles['list_services'] = 2
        with LogCapture('ecsmanage.core.retry') as log:
            compare(self.manager.list_names('foo'), self.names)
        self.assertEqual(len(log.records), 2)
        self.assertTrue(log.records[0].getMessage().startswith('listing services in foo failed due to'))

    def test_missing_cluster_is_fatal(self):
        with self.assertRaises(ClientError):
            self.manager.list_names('nope')


class TestServiceManager_get(unittest.TestCase):

    def setUp(self):
        self.client = FakeControlPlane(clusters={'foo': [service_data('web', cluster='foo')]})
        self.manager = ServiceManager(self.client, RetryPolicy(sleep=Mock()))

    def test_get(self):
        service = self.manager.get('foo', 'web')
        self.assertEqual(service.name, 'web')
        self.assertEqual(service.pk, 'foo:web')
        self.assertEqual(service.cluster, 'foo')

    def test_failures_are_fatal(self):
        with self.assertRaises(Service.DoesNotExist):
            self.manager.get('foo', 'nope')
        self.assertEqual(len(self.client.calls_to('describe_services')), 1)

    def test_no_descriptions_is_fatal(self):
        self.client.describe_services = Mock(return_value={'services': [], 'failures': []})
        with self.assertRaises(Service.DoesNotExist):
            self.manager.get('foo', 'web')

    def test_throttling_is_retried(self):
        self.client.throttles['describe_services'] = 1
        with LogCapture('ecsmanage.core.retry') as log:
            self.assertEqual(self.manager.get('foo', 'web').name, 'web')
        self.assertTrue(log.records[0].getMessage().startswith('describing foo/web failed due to'))


class TestServiceManager_list(unittest.TestCase):

    def test_describes_each_service(self):
        client = FakeControlPlane(clusters={'foo': [service_data('a', cluster='foo'), service_data('b', cluster='foo')]})
        manager = ServiceManager(client, RetryPolicy(sleep=Mock()))
        compare([s.name for s in manager.list('foo')], ['a', 'b'])
        compare(client.calls_to('describe_services'), [('foo', ['a']), ('foo', ['b'])])

    def test_first_failure_aborts(self):
        client = FakeControlPlane(clusters={'foo': [service_data('a', cluster='foo'), service_data('b', cluster='foo')]})
        client.describe_services = Mock(return_value={'services': [], 'failures': [{'reason': 'MISSING'}]})
        manager = ServiceManager(client, RetryPolicy(sleep=Mock()))
        with self.assertRaises(Service.DoesNotExist):
            manager.list('foo')
        self.assertEqual(client.describe_services.call_count, 1)


class TestServiceManager_scale(unittest.TestCase):

    def test_scale(self):
        client = FakeControlPlane(clusters={'foo': [service_data('web', cluster='foo', desired=1)]})
        manager = ServiceManager(client, RetryPolicy(sleep=Mock()))
        service = manager.scale(manager.get('foo', 'web'), 5)
        self.assertEqual(service.desired_count, 5)
        compare(client.calls_to('update_service'), [('foo', 'web', 5)])

    def test_throttled_update_is_retried(self):
        client = FakeControlPlane(
            clusters={'foo': [service_data('web', cluster='foo', desired=1)]},
            throttles={'update_service': 1}
        )
        manager = ServiceManager(client, RetryPolicy(sleep=Mock()))
        with LogCapture('ecsmanage.core.retry') as log:
            manager.scale(manager.get('foo', 'web'), 3)
        self.assertTrue(log.records[0].getMessage().startswith('updating foo/web to desired count 3 failed'))
        self.assertEqual(len(client.calls_to('update_service')), 2)
