from copy import deepcopy
from typing import Any, Callable, Dict, Optional, TypeVar

from ecsmanage.core.retry import RetryPolicy, retry
from ecsmanage.exceptions import (
    ObjectDoesNotExist,
    ObjectImproperlyConfigured,
    OperationFailed as BaseOperationFailed,
)
from ecsmanage.types import ControlPlaneClient

T = TypeVar('T')


class Manager:
    """
    Managers own all the remote calls for one kind of object.  Every call goes through
    :py:func:`ecsmanage.core.retry.retry` so that throttling is handled in one place.
    """

    family: str = 'ecs'

    def __init__(self, client: ControlPlaneClient, policy: Optional[RetryPolicy] = None) -> None:
        self.client = client
        self.policy = policy

    def call(self, description: str, operation: Callable[[], T]) -> T:
        return retry(description, operation, family=self.family, policy=self.policy)


class Model:

    class DoesNotExist(ObjectDoesNotExist):
        """
        We tried to get a single object but it does not exist in AWS.
        """
        pass

    class ImproperlyConfigured(ObjectImproperlyConfigured):
        """
        The object is missing data we need before we can act on it.
        """
        pass

    class OperationFailed(BaseOperationFailed):
        """
        We did a call to AWS we expected to succeed, but it failed.
        """
        pass

    def __init__(self, data: Dict[str, Any]) -> None:
        self.data = data

    @property
    def pk(self) -> str:
        raise NotImplementedError

    @property
    def name(self) -> str:
        raise NotImplementedError

    @property
    def arn(self) -> Optional[str]:
        raise NotImplementedError

    def render(self) -> Dict[str, Any]:
        return deepcopy(self.data)

    def render_for_display(self) -> Dict[str, Any]:
        return self.render()

    def __eq__(self, other) -> bool:
        if self.__class__ != other.__class__:
            return False
        return self.data == other.data

    def __str__(self) -> str:
        return '{}(pk="{}")'.format(self.__class__.__name__, self.pk)
