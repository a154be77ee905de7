from .abstract import Manager, Model  # noqa: F401
from .ecr import ImageDetail, ImageManager  # noqa: F401
from .ecs import (  # noqa: F401
    ContainerDefinition,
    Service,
    ServiceManager,
    TaskDefinition,
    TaskDefinitionManager,
)
from .elbv2 import TargetGroup, TargetGroupManager  # noqa: F401
