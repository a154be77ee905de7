from typing import Optional

from .abstract import Manager, Model


class TargetGroupManager(Manager):

    family = 'elbv2'

    def get(self, pk: str) -> "TargetGroup":
        """
        :param pk str: a target group ARN
        """
        response = self.call(
            'describing {}'.format(pk),
            lambda: self.client.describe_target_groups([pk])
        )
        tgs = response.get('TargetGroups', [])
        if not tgs:
            raise TargetGroup.DoesNotExist('No target group with ARN "{}" exists in AWS'.format(pk))
        return TargetGroup(tgs[-1])


class TargetGroup(Model):

    @property
    def pk(self) -> str:
        return self.data['TargetGroupArn']

    @property
    def name(self) -> str:
        return self.data.get('TargetGroupName', '')

    @property
    def arn(self) -> Optional[str]:
        return self.data['TargetGroupArn']
