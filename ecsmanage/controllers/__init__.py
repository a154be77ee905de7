from .base import Base  # noqa: F401
from .services import ECSServices  # noqa: F401
