"""
Compare, sync and bulk update the services in ECS clusters.

Everything here is strictly sequential.  ECS rate limits mutating calls hard, so we
also pause between each create or update we issue.
"""
import json
import logging
import os
import time
from typing import Dict, List, Optional, Sequence, Union

from botocore.exceptions import BotoCoreError, ClientError

from ecsmanage.core.audit import ServiceAuditor, is_healthy
from ecsmanage.core.models import Service, ServiceManager
from ecsmanage.core.retry import RetryPolicy
from ecsmanage.exceptions import InvalidModification
from ecsmanage.types import ControlPlaneClient, SupportsSleep

logger = logging.getLogger(__name__)

DEFAULT_PAUSE: float = 10.0


class ClusterHandle:
    """
    A named cluster plus the control plane for the region it lives in.
    """

    def __init__(self, name: str, client: ControlPlaneClient, policy: Optional[RetryPolicy] = None) -> None:
        self.name = name
        self.client = client
        self.policy = policy
        self.services = ServiceManager(client, policy)

    def list_services(self) -> Sequence[Service]:
        return self.services.list(self.name)

    def auditor(self) -> ServiceAuditor:
        return ServiceAuditor(self.client, self.policy)

    def __str__(self) -> str:
        return 'ClusterHandle(name="{}")'.format(self.name)


class SyncReport:
    """
    What ``sync`` did with each service that was missing from the destination.
    """

    def __init__(self) -> None:
        self.created: List[str] = []
        self.skipped: Dict[str, List[str]] = {}
        self.failed: List[str] = []

    @property
    def total(self) -> int:
        return len(self.created) + len(self.skipped) + len(self.failed)


class DesiredCountModification:
    """
    A new desired count for the services in a cluster: either one ``int`` for all of
    them, or a dict of service name to count.
    """

    class MissingServices(InvalidModification):
        pass

    def __init__(self, count: Union[int, Dict[str, int]]) -> None:
        if isinstance(count, dict):
            for name, value in count.items():
                self._check(value, 'Desired count for "{}"'.format(name))
        else:
            self._check(count, 'Desired count')
        self.count = count

    @staticmethod
    def _check(value: object, label: str) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidModification('{} must be an integer, not {!r}'.format(label, value))
        if value < 0:
            raise InvalidModification('{} must not be negative, not {}'.format(label, value))

    @classmethod
    def from_argument(cls, value: str) -> "DesiredCountModification":
        """
        Parse the command line argument for ``update desired-count``: either an integer,
        or the path to a JSON file like the one ``export desired-count`` writes.
        """
        try:
            return cls(int(value))
        except ValueError:
            pass
        if not os.path.exists(value):
            raise InvalidModification('"{}" is neither an integer nor an existing JSON file'.format(value))
        try:
            with open(value, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise InvalidModification('Could not load desired counts from "{}": {}'.format(value, e))
        if not isinstance(data, dict):
            raise InvalidModification('"{}" must contain a JSON object of service name to count'.format(value))
        return cls(data)

    @property
    def is_uniform(self) -> bool:
        return not isinstance(self.count, dict)

    def validate(self, names: Sequence[str]) -> None:
        """
        Raises:
            DesiredCountModification.MissingServices: we have a per-service mapping and
                some of ``names`` aren't in it
        """
        if self.is_uniform:
            return
        missing = [name for name in names if name not in self.count]
        if missing:
            raise self.MissingServices(
                'No desired count given for: {}'.format(', '.join(missing))
            )

    def count_for(self, name: str) -> int:
        if isinstance(self.count, dict):
            if name not in self.count:
                raise self.MissingServices('No desired count given for: {}'.format(name))
            return self.count[name]
        return self.count

    def __str__(self) -> str:
        return 'desired-count {}'.format(self.count)


def diff(source: ClusterHandle, destination: ClusterHandle) -> List[Service]:
    """
    Return the services in ``source`` whose names don't appear in ``destination``, in the
    order ``source`` lists them.
    """
    source_services = source.list_services()
    destination_names = {s.name for s in destination.list_services()}
    return [s for s in source_services if s.name not in destination_names]


def create_service(
    destination: ClusterHandle,
    template: Service,
    role_suffix: Optional[str] = None
) -> Optional[Service]:
    """
    Create a copy of ``template`` in ``destination``.

    Raises:
        Service.ImproperlyConfigured: ``template`` has no name, desired count or task definition

    Returns:
        The new service, or ``None`` if AWS refused to create it or gave us nothing back.
    """
    role = template.infer_role(destination.name, role_suffix)
    logger.info('Creating %s/%s with role: %s', destination.name, template.name, role)
    try:
        return destination.services.create(destination.name, template, role=role)
    except (ClientError, BotoCoreError, Service.OperationFailed) as e:
        logger.error('Failed to create %s/%s, due to %s', destination.name, template.name, e)
    return None


def sync(
    source: ClusterHandle,
    destination: ClusterHandle,
    role_suffix: Optional[str] = None,
    pause: float = DEFAULT_PAUSE,
    sleep: SupportsSleep = time.sleep
) -> SyncReport:
    """
    Create in ``destination`` every healthy service from ``source`` that ``destination``
    doesn't have yet.  Unhealthy services are never copied.  A service AWS refuses to
    create is recorded as failed and we carry on with the rest.
    """
    report = SyncReport()
    auditor = source.auditor()
    issued = 0
    for template in diff(source, destination):
        findings = auditor.audit(template)
        if not is_healthy(findings):
            logger.info('Skipping %s/%s: %s', source.name, template.name, ', '.join(findings))
            report.skipped[template.name] = findings
            continue
        if issued:
            sleep(pause)
        issued += 1
        if create_service(destination, template, role_suffix=role_suffix):
            report.created.append(template.name)
        else:
            report.failed.append(template.name)
    return report


def update_all(
    cluster: ClusterHandle,
    modification: DesiredCountModification,
    pause: float = DEFAULT_PAUSE,
    sleep: SupportsSleep = time.sleep
) -> List[Service]:
    """
    Apply ``modification`` to every service in ``cluster``, one at a time.  If the
    modification doesn't cover every service, nothing is updated.
    """
    services = cluster.list_services()
    modification.validate([s.name for s in services])
    updated = []
    for index, service in enumerate(services):
        if index:
            sleep(pause)
        count = modification.count_for(service.name)
        logger.info(
            'Updating %s/%s desired count to %s. It was %s',
            cluster.name, service.name, count, service.desired_count
        )
        updated.append(cluster.services.scale(service, count))
    return updated
