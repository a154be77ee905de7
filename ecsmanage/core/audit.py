"""
Audit ECS services for broken references.

A service is healthy when every image its task definition names can be found in ECR,
every target group it is attached to can be found in ELBv2, and it is running at least
as many tasks as it wants.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from botocore.exceptions import ClientError

from ecsmanage.core.models import (
    ContainerDefinition,
    ImageDetail,
    ImageManager,
    Model,
    Service,
    TargetGroup,
    TargetGroupManager,
    TaskDefinitionManager,
)
from ecsmanage.core.retry import RetryPolicy
from ecsmanage.types import ControlPlaneClient

logger = logging.getLogger(__name__)

INVALID_IMAGES: str = 'Invalid image references'
INVALID_TARGET_GROUPS: str = 'Invalid target-group references'
UNDER_CAPACITY: str = 'Running count below desired'


class LookupResult:
    """
    The outcome of resolving one reference (an image or a target group) that a service
    depends on.  Exactly one of ``value`` and ``error`` is set.
    """

    def __init__(self, reference: str, value: Optional[Model] = None, error: Optional[str] = None) -> None:
        self.reference = reference
        self.value = value
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self) -> str:
        if self.ok:
            return 'LookupResult(reference="{}", value={})'.format(self.reference, self.value)
        return 'LookupResult(reference="{}", error="{}")'.format(self.reference, self.error)


def is_healthy(findings: List[str]) -> bool:
    return not findings


class ServiceAuditor:

    def __init__(self, client: ControlPlaneClient, policy: Optional[RetryPolicy] = None) -> None:
        self.task_definitions = TaskDefinitionManager(client, policy)
        self.images = ImageManager(client, policy)
        self.target_groups = TargetGroupManager(client, policy)

    def resolve_images(self, service: Service) -> List[LookupResult]:
        """
        Look up in ECR every image named by the containers in ``service``'s task definition.
        Containers with no image are ignored.  A service with no task definition has
        nothing to resolve.
        """
        if not service.task_definition:
            return []
        task_definition = self.task_definitions.get(service.task_definition)
        results = []
        for container in task_definition.images:
            image = container.image
            try:
                repository, tag = container.repository_and_tag
                results.append(LookupResult(image, value=self.images.get(repository, tag)))
            except (ContainerDefinition.ImproperlyConfigured, ImageDetail.DoesNotExist, ClientError) as e:
                results.append(LookupResult(image, error=str(e)))
        return results

    def resolve_target_groups(self, service: Service) -> List[LookupResult]:
        """
        Look up in ELBv2 every target group ``service`` is attached to.  Classic ELB
        bindings have no target group and are ignored.
        """
        results = []
        for arn in service.target_group_arns:
            try:
                results.append(LookupResult(arn, value=self.target_groups.get(arn)))
            except (TargetGroup.DoesNotExist, ClientError) as e:
                results.append(LookupResult(arn, error=str(e)))
        return results

    def audit(self, service: Service) -> List[str]:
        """
        Evaluate our health conditions against ``service``.

        :returns: the sorted names of the conditions that are true.  An empty list means healthy.
        """
        checks: Dict[str, Callable[[], Any]] = {
            INVALID_IMAGES: lambda: self._has_failures(service, self.resolve_images(service)),
            INVALID_TARGET_GROUPS: lambda: self._has_failures(service, self.resolve_target_groups(service)),
            UNDER_CAPACITY: lambda: service.under_capacity,
        }
        return sorted(name for name, check in checks.items() if check())

    def _has_failures(self, service: Service, results: List[LookupResult]) -> bool:
        failed = False
        for result in results:
            if not result.ok:
                logger.debug('%s: %s', service.pk, result.error)
                failed = True
        return failed
