import unittest

from mock import MagicMock, Mock
from testfixtures import Replacer, compare

from ecsmanage.core.aws import AWSControlPlane, AWSSessionBuilder


class TestAWSSessionBuilder(unittest.TestCase):

    def test_unknown_profile(self):
        with Replacer() as r:
            r.replace('ecsmanage.core.aws.boto3.session.Session', Mock(return_value=Mock(available_profiles=['dev'])))
            with self.assertRaises(AWSSessionBuilder.NoSuchAWSProfile):
                AWSSessionBuilder().new('us-west-2', profile='prod')

    def test_known_profile(self):
        session_class = Mock(return_value=Mock(available_profiles=['prod']))
        with Replacer() as r:
            r.replace('ecsmanage.core.aws.boto3.session.Session', session_class)
            AWSSessionBuilder().new('us-west-2', profile='prod')
        self.assertEqual(session_class.call_args[1], {'profile_name': 'prod', 'region_name': 'us-west-2'})

    def test_no_profile(self):
        session_class = Mock()
        with Replacer() as r:
            r.replace('ecsmanage.core.aws.boto3.session.Session', session_class)
            AWSSessionBuilder().new('us-east-1')
        self.assertEqual(session_class.call_args[1], {'region_name': 'us-east-1'})


class TestAWSControlPlane(unittest.TestCase):

    def setUp(self):
        self.clients = {'ecs': MagicMock(), 'ecr': MagicMock(), 'elbv2': MagicMock()}
        session = Mock(region_name='us-west-2')
        session.client.side_effect = lambda name: self.clients[name]
        self.plane = AWSControlPlane(session)

    def test_list_services_first_page_has_no_token(self):
        self.plane.list_services('foo')
        self.clients['ecs'].list_services.assert_called_once_with(cluster='foo')

    def test_list_services_passes_token(self):
        self.plane.list_services('foo', next_token='abc')
        self.clients['ecs'].list_services.assert_called_once_with(cluster='foo', nextToken='abc')

    def test_update_service(self):
        self.plane.update_service('foo', 'web', 3)
        self.clients['ecs'].update_service.assert_called_once_with(cluster='foo', service='web', desiredCount=3)

    def test_describe_images(self):
        self.plane.describe_images('foobar', '1.0')
        self.clients['ecr'].describe_images.assert_called_once_with(
            repositoryName='foobar',
            imageIds=[{'imageTag': '1.0'}]
        )

    def test_describe_target_groups(self):
        self.plane.describe_target_groups(['arn:tg'])
        self.clients['elbv2'].describe_target_groups.assert_called_once_with(TargetGroupArns=['arn:tg'])

    def test_region(self):
        compare(str(self.plane), 'AWSControlPlane(region="us-west-2")')
