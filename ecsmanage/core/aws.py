from typing import Any, Dict, List, Optional

import boto3


class AWSSessionBuilder:

    class NoSuchAWSProfile(Exception):
        """
        We raise this if the AWS profile named on the command line does not exist
        in the user's ``~/.aws/config`` file.
        """
        pass

    def new(self, region: str, profile: Optional[str] = None) -> boto3.session.Session:
        """
        Build and return a properly configured boto3 ``Session`` object.

        Args:
            region: the AWS region our cluster lives in

        Keyword Args:
            profile: the name of an AWS profile in ``~/.aws/config``.  If ``None``,
                leave it up to the normal AWS credentials resolution.

        Raises:
            AWSSessionBuilder.NoSuchAWSProfile: the requested profile is not in
                ``~/.aws/config``

        Returns:
            A configured boto3 ``Session`` object.
        """
        if profile:
            if profile not in boto3.session.Session().available_profiles:
                raise self.NoSuchAWSProfile("AWS profile '{}' does not exist in your ~/.aws/config".format(profile))
            return boto3.session.Session(profile_name=profile, region_name=region)
        return boto3.session.Session(region_name=region)


class AWSControlPlane:
    """
    The boto3 implementation of :py:class:`ecsmanage.types.ControlPlaneClient` for a
    single region.  This does no retrying and no interpretation of the responses; that's
    the job of the managers in :py:mod:`ecsmanage.core.models`.
    """

    def __init__(self, session: boto3.session.Session) -> None:
        self.session = session
        self.region = session.region_name
        self.ecs = session.client('ecs')
        self.ecr = session.client('ecr')
        self.elbv2 = session.client('elbv2')

    @classmethod
    def new(cls, region: str, profile: Optional[str] = None) -> "AWSControlPlane":
        return cls(AWSSessionBuilder().new(region, profile=profile))

    def list_services(self, cluster: str, next_token: Optional[str] = None) -> Dict[str, Any]:
        kwargs = {'cluster': cluster}
        if next_token:
            kwargs['nextToken'] = next_token
        return self.ecs.list_services(**kwargs)

    def describe_services(self, cluster: str, services: List[str]) -> Dict[str, Any]:
        return self.ecs.describe_services(cluster=cluster, services=services)

    def create_service(self, **request: Any) -> Dict[str, Any]:
        return self.ecs.create_service(**request)

    def update_service(self, cluster: str, service: str, desired_count: int) -> Dict[str, Any]:
        return self.ecs.update_service(cluster=cluster, service=service, desiredCount=desired_count)

    def describe_task_definition(self, task_definition: str) -> Dict[str, Any]:
        return self.ecs.describe_task_definition(taskDefinition=task_definition)

    def describe_images(self, repository_name: str, image_tag: str) -> Dict[str, Any]:
        return self.ecr.describe_images(
            repositoryName=repository_name,
            imageIds=[{'imageTag': image_tag}]
        )

    def describe_target_groups(self, target_group_arns: List[str]) -> Dict[str, Any]:
        return self.elbv2.describe_target_groups(TargetGroupArns=target_group_arns)

    def __str__(self) -> str:
        return 'AWSControlPlane(region="{}")'.format(self.region)
