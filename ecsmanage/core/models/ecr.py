from typing import Optional

from .abstract import Manager, Model


class ImageManager(Manager):

    family = 'ecr'

    def get(self, repository: str, tag: str) -> "ImageDetail":
        """
        Look up a single image by exact tag.

        Raises:
            ImageDetail.DoesNotExist: ECR answered, but had no image with that tag
            botocore.exceptions.ClientError: ECR refused the lookup (no such repository,
                no such image, access denied, ...)
        """
        response = self.call(
            'describing image {}:{}'.format(repository, tag),
            lambda: self.client.describe_images(repository, tag)
        )
        details = response.get('imageDetails', [])
        if not details:
            raise ImageDetail.DoesNotExist('No image tagged "{}" in repository "{}"'.format(tag, repository))
        return ImageDetail(details[-1])


class ImageDetail(Model):

    @property
    def pk(self) -> str:
        return '{}@{}'.format(self.data.get('repositoryName'), self.data.get('imageDigest'))

    @property
    def name(self) -> str:
        return self.data.get('repositoryName', '')

    @property
    def arn(self) -> Optional[str]:
        return None
