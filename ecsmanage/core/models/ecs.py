from typing import Any, Dict, List, Optional, Sequence, Tuple

from .abstract import Manager, Model

__all__ = [
    'ContainerDefinition',
    'Service',
    'ServiceManager',
    'TaskDefinition',
    'TaskDefinitionManager',
]

# These are copied verbatim from the template service when we clone it into another
# cluster.  Everything else (ARNs, counts, events, deployments) is either generated by
# AWS or handled explicitly.
CLONED_SERVICE_KEYS: Tuple[str, ...] = (
    'deploymentConfiguration',
    'healthCheckGracePeriodSeconds',
    'launchType',
    'loadBalancers',
    'networkConfiguration',
    'placementConstraints',
    'placementStrategy',
    'platformVersion',
)

DEFAULT_ROLE_SUFFIX: str = 'ECSServiceRole'


# ----------------------------------------
# Managers
# ----------------------------------------

class TaskDefinitionManager(Manager):

    family = 'ecs'

    def get(self, pk: str) -> "TaskDefinition":
        """
        :param pk str: a task definition ARN or "family:revision"
        """
        response = self.call(
            'describing {}'.format(pk),
            lambda: self.client.describe_task_definition(pk)
        )
        data = response.get('taskDefinition') or {'taskDefinitionArn': pk}
        containers = [ContainerDefinition(d) for d in data.pop('containerDefinitions', [])]
        return TaskDefinition(data, containers=containers)


class ServiceManager(Manager):

    family = 'ecs'

    def list_names(self, cluster: str) -> List[str]:
        """
        Page through ``list_services`` for ``cluster`` and return the names of all the
        services in it, in the order AWS gave them to us.
        """
        names: List[str] = []
        token: Optional[str] = None
        while True:
            response = self.call(
                'listing services in {}'.format(cluster),
                lambda: self.client.list_services(cluster, next_token=token)
            )
            names.extend(arn.rsplit('/', 1)[-1] for arn in response.get('serviceArns', []))
            token = response.get('nextToken')
            if not token:
                break
        return names

    def get(self, cluster: str, name: str) -> "Service":
        response = self.call(
            'describing {}/{}'.format(cluster, name),
            lambda: self.client.describe_services(cluster, [name])
        )
        failures = response.get('failures', [])
        if failures:
            raise Service.DoesNotExist('Failures describing {}/{}: {}'.format(cluster, name, failures))
        services = response.get('services', [])
        if not services:
            raise Service.DoesNotExist('No service description for {}/{}'.format(cluster, name))
        data = services[-1]
        data['cluster'] = cluster
        return Service(data)

    def list(self, cluster: str) -> Sequence["Service"]:
        return [self.get(cluster, name) for name in self.list_names(cluster)]

    def create(self, cluster: str, template: "Service", role: Optional[str] = None) -> "Service":
        """
        Create a copy of ``template`` in ``cluster``.

        Raises:
            Service.ImproperlyConfigured: ``template`` has no name, desired count or task definition
            botocore.exceptions.ClientError: AWS refused to create the service
        """
        request = template.render_for_create(cluster, role=role)
        response = self.call(
            'creating {}/{}'.format(cluster, template.name),
            lambda: self.client.create_service(**request)
        )
        if not response.get('service'):
            raise Service.OperationFailed(
                'Tried to create {}/{}, but nothing was returned'.format(cluster, template.name)
            )
        data = response['service']
        data['cluster'] = cluster
        return Service(data)

    def scale(self, obj: "Service", count: int) -> "Service":
        name = obj.name
        response = self.call(
            'updating {}/{} to desired count {}'.format(obj.cluster, name, count),
            lambda: self.client.update_service(obj.cluster, name, count)
        )
        if not response.get('service'):
            raise Service.OperationFailed('Tried to update {}, but nothing was returned'.format(obj))
        data = response['service']
        data['cluster'] = obj.cluster
        return Service(data)


# ----------------------------------------
# Models
# ----------------------------------------

class ContainerDefinition(Model):

    @property
    def pk(self) -> str:
        return self.data.get('name', '')

    @property
    def name(self) -> str:
        return self.data.get('name', '')

    @property
    def arn(self) -> Optional[str]:
        return None

    @property
    def image(self) -> Optional[str]:
        return self.data.get('image') or None

    @property
    def repository_and_tag(self) -> Tuple[str, str]:
        """
        Split our image reference into ECR repository name and tag.  The repository is
        whatever follows the last ``/`` of the image reference, so
        ``123456789012.dkr.ecr.us-west-2.amazonaws.com/foobar:1.2.3`` gives
        ``("foobar", "1.2.3")``.

        Raises:
            ContainerDefinition.ImproperlyConfigured: there is no image, the image is pinned
                by digest, or it has no tag
        """
        if not self.image:
            raise self.ImproperlyConfigured('Container "{}" has no image'.format(self.name))
        fragment = self.image.rsplit('/', 1)[-1]
        if '@' in fragment:
            raise self.ImproperlyConfigured(
                'Image "{}" in container "{}" is pinned by digest, not tag'.format(self.image, self.name)
            )
        if ':' not in fragment:
            raise self.ImproperlyConfigured(
                'Image "{}" in container "{}" has no tag'.format(self.image, self.name)
            )
        repository, tag = fragment.rsplit(':', 1)
        if not repository or not tag:
            raise self.ImproperlyConfigured(
                'Image "{}" in container "{}" is malformed'.format(self.image, self.name)
            )
        return repository, tag


class TaskDefinition(Model):

    def __init__(self, data: Dict[str, Any], containers: Optional[List[ContainerDefinition]] = None) -> None:
        super().__init__(data)
        self.containers: List[ContainerDefinition] = containers if containers else []

    @property
    def pk(self) -> str:
        return self.arn or ''

    @property
    def name(self) -> str:
        return '{}:{}'.format(self.data.get('family'), self.data.get('revision'))

    @property
    def arn(self) -> Optional[str]:
        return self.data.get('taskDefinitionArn')

    @property
    def images(self) -> List[ContainerDefinition]:
        """
        Containers that actually name an image.
        """
        return [c for c in self.containers if c.image]


class Service(Model):

    def __init__(self, data: Dict[str, Any]) -> None:
        super().__init__(data)
        if 'cluster' not in self.data and self.data.get('clusterArn'):
            self.data['cluster'] = self.data['clusterArn'].split('/')[-1]

    # ---------------------
    # Model overrides
    # ---------------------

    @property
    def pk(self) -> str:
        """
        Service names are only unique within a cluster, so to fully identify a service you have to
        give both cluster and service name.

        :returns: "{cluster_name}:{service_name}".
        """
        return ':'.join([str(self.data.get('cluster')), str(self.data.get('serviceName'))])

    @property
    def name(self) -> str:
        name = self.data.get('serviceName')
        if not name:
            raise self.ImproperlyConfigured('No service name found for {!r}'.format(self.data))
        return name

    @property
    def arn(self) -> Optional[str]:
        return self.data.get('serviceArn', None)

    # ----------------------------
    # Service-specific properties
    # ----------------------------

    @property
    def cluster(self) -> Optional[str]:
        return self.data.get('cluster')

    @property
    def task_definition(self) -> Optional[str]:
        return self.data.get('taskDefinition') or None

    @property
    def desired_count(self) -> Optional[int]:
        return self.data.get('desiredCount')

    @property
    def running_count(self) -> Optional[int]:
        return self.data.get('runningCount')

    @property
    def load_balancers(self) -> List[Dict[str, Any]]:
        return self.data.get('loadBalancers') or []

    @property
    def target_group_arns(self) -> List[str]:
        return [lb['targetGroupArn'] for lb in self.load_balancers if lb.get('targetGroupArn')]

    @property
    def uses_awsvpc(self) -> bool:
        network = self.data.get('networkConfiguration') or {}
        return network.get('awsvpcConfiguration') is not None

    @property
    def under_capacity(self) -> bool:
        return (self.running_count or 0) < (self.desired_count or 0)

    def infer_role(self, cluster: str, role_suffix: Optional[str] = None) -> Optional[str]:
        """
        Services behind a load balancer need an IAM service role, unless they use
        ``awsvpc`` networking, in which case ECS uses its service-linked role and will
        refuse one we pass in.

        :returns: "{cluster}-{role_suffix}" or ``None``
        """
        if self.load_balancers and not self.uses_awsvpc:
            return '{}-{}'.format(cluster, role_suffix or DEFAULT_ROLE_SUFFIX)
        return None

    def render_for_display(self) -> Dict[str, Any]:
        data = self.render()
        data['cluster'] = self.cluster
        data['task_definition'] = self.task_definition
        return data

    def render_for_create(self, cluster: str, role: Optional[str] = None) -> Dict[str, Any]:
        """
        Prepare the payload for ``create_service()`` to make a copy of this service in ``cluster``.
        """
        name = self.name
        if self.desired_count is None:
            raise self.ImproperlyConfigured('No desired count found for {}'.format(name))
        if not self.task_definition:
            raise self.ImproperlyConfigured('No task definition found for {}'.format(name))
        data: Dict[str, Any] = {
            'cluster': cluster,
            'serviceName': name,
            'taskDefinition': self.task_definition,
            'desiredCount': self.desired_count,
        }
        for key in CLONED_SERVICE_KEYS:
            if self.data.get(key) is not None:
                data[key] = self.data[key]
        if role:
            data['role'] = role
        return data
