"""
Retry remote AWS calls that fail because we're being rate limited.

ECS, ECR and ELBv2 all throttle bulk callers, and they each report throttling a
little differently, so each API family gets its own classifier.  A classifier
answers one question: is this ``ClientError`` transient?  Transient errors are
retried forever with exponential backoff; anything else is re-raised as is.
"""
import logging
import random
import time
from typing import Any, Callable, Dict, Optional, TypeVar

from botocore.exceptions import ClientError

from ecsmanage.types import SupportsSleep

logger = logging.getLogger(__name__)

T = TypeVar('T')


# ========================
# Classifiers
# ========================

class ErrorClassifier:

    def is_transient(self, error: ClientError) -> bool:
        raise NotImplementedError


class ExactCodeClassifier(ErrorClassifier):
    """
    Transient if the machine readable error code is exactly ``code``.
    """

    def __init__(self, code: str) -> None:
        self.code = code

    def is_transient(self, error: ClientError) -> bool:
        return error.response.get('Error', {}).get('Code') == self.code


class SubstringClassifier(ErrorClassifier):
    """
    Transient if ``marker`` appears anywhere in the rendered error.  ELBv2 is a query
    API whose errors come back as XML, so the throttling code can only be trusted to
    show up somewhere in the text.
    """

    def __init__(self, marker: str) -> None:
        self.marker = marker

    def is_transient(self, error: ClientError) -> bool:
        return self.marker in str(error)


ERROR_CLASSIFIERS: Dict[str, ErrorClassifier] = {
    'ecs': ExactCodeClassifier('ThrottlingException'),
    'ecr': ExactCodeClassifier('ThrottlingException'),
    'elbv2': SubstringClassifier('Throttling'),
}


def register_classifier(family: str, classifier: ErrorClassifier) -> None:
    ERROR_CLASSIFIERS[family] = classifier


def is_transient(family: str, error: Exception) -> bool:
    if not isinstance(error, ClientError):
        return False
    try:
        classifier = ERROR_CLASSIFIERS[family]
    except KeyError:
        raise ValueError(f'No error classifier registered for "{family}"')
    return classifier.is_transient(error)


# ========================
# Backoff
# ========================

class RetryPolicy:
    """
    Exponential backoff settings.  There is no limit on the number of attempts: we
    keep going until AWS stops throttling us or gives us a real error.

    Args:
        initial_interval: seconds to wait before the first retry
        multiplier: grow the interval by this much after each retry
        max_interval: never wait longer than this many seconds (before jitter)
        randomization_factor: jitter each wait by up to this fraction either way
        sleep: the function to call to wait; tests pass a ``Mock``
    """

    def __init__(
        self,
        initial_interval: float = 0.5,
        multiplier: float = 1.5,
        max_interval: float = 60.0,
        randomization_factor: float = 0.5,
        sleep: SupportsSleep = time.sleep
    ) -> None:
        self.initial_interval = initial_interval
        self.multiplier = multiplier
        self.max_interval = max_interval
        self.randomization_factor = randomization_factor
        self.sleep = sleep

    @classmethod
    def from_config(cls, config: Any, section: str = 'ecsmanage') -> "RetryPolicy":
        """
        Build a policy from a cement config handler.
        """
        return cls(
            initial_interval=float(config.get(section, 'backoff_initial_interval')),
            multiplier=float(config.get(section, 'backoff_multiplier')),
            max_interval=float(config.get(section, 'backoff_max_interval')),
            randomization_factor=float(config.get(section, 'backoff_randomization_factor')),
        )

    def intervals(self):
        interval = self.initial_interval
        while True:
            delta = self.randomization_factor * interval
            yield random.uniform(interval - delta, interval + delta)
            interval = min(interval * self.multiplier, self.max_interval)


DEFAULT_POLICY = RetryPolicy()


def retry(
    description: str,
    operation: Callable[[], T],
    family: str = 'ecs',
    policy: Optional[RetryPolicy] = None
) -> T:
    """
    Call ``operation`` until it returns or raises something that isn't throttling.

    Args:
        description: what we're doing, for the retry log message
        operation: a no-argument callable that does the remote call
        family: which API family ``operation`` talks to; picks the error classifier
        policy: backoff settings

    Returns:
        Whatever ``operation`` returns.
    """
    if policy is None:
        policy = DEFAULT_POLICY
    intervals = policy.intervals()
    while True:
        try:
            return operation()
        except ClientError as e:
            if not is_transient(family, e):
                raise
            logger.info('%s failed due to %s. Retrying', description, e)
            policy.sleep(next(intervals))
