from collections.abc import Callable
from functools import wraps

from botocore.exceptions import BotoCoreError, ClientError
import click

from ecsmanage.core.aws import AWSSessionBuilder
from ecsmanage.exceptions import (
    InvalidModification,
    ObjectDoesNotExist,
    ObjectImproperlyConfigured,
    OperationFailed,
)

# ========================
# Decorators
# ========================

def handle_model_exceptions(func: Callable) -> Callable:
    """
    This decorator catches all the kinds of exceptions we expect to see in normal
    operation, prints them in red and sets a failing exit code, while letting others
    display their stack traces normally.

    We use this decorator to wrap cement command methods on
    :py:class:`cement.ext.ext_argparse.ArgparseController` subclasses.
    """

    @wraps(func)
    def inner(self, *args, **kwargs):
        try:
            obj = func(self, *args, **kwargs)
        except (
            ObjectDoesNotExist,
            ObjectImproperlyConfigured,
            OperationFailed,
            InvalidModification,
            AWSSessionBuilder.NoSuchAWSProfile,
            ClientError,
            BotoCoreError,
        ) as e:
            self.app.print(click.style(str(e), fg="red"))
            self.app.exit_code = 1
        else:
            return obj
    return inner
