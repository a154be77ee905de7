from typing import Any, Dict, List, Optional, Protocol


class ControlPlaneClient(Protocol):
    """
    The remote operations the reconciliation engine needs from AWS.  Every method returns
    the boto3-shaped response dict and raises ``botocore.exceptions.ClientError`` when
    AWS complains.
    """

    def list_services(self, cluster: str, next_token: Optional[str] = None) -> Dict[str, Any]:
        ...

    def describe_services(self, cluster: str, services: List[str]) -> Dict[str, Any]:
        ...

    def create_service(self, **request: Any) -> Dict[str, Any]:
        ...

    def update_service(self, cluster: str, service: str, desired_count: int) -> Dict[str, Any]:
        ...

    def describe_task_definition(self, task_definition: str) -> Dict[str, Any]:
        ...

    def describe_images(self, repository_name: str, image_tag: str) -> Dict[str, Any]:
        ...

    def describe_target_groups(self, target_group_arns: List[str]) -> Dict[str, Any]:
        ...


class SupportsSleep(Protocol):

    def __call__(self, seconds: float) -> None:
        ...
