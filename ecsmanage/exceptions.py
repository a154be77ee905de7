class ObjectDoesNotExist(Exception):
    """
    We tried to get a single object but it does not exist in AWS.
    """
    pass


class ObjectImproperlyConfigured(Exception):
    """
    An object we got from AWS is missing something we need before we can act on it.
    """
    pass


class OperationFailed(Exception):
    """
    We tried to do something we expected to succeed, but it failed.
    """
    pass


class InvalidModification(Exception):
    """
    The modification requested on the command line can't be applied to the services
    in the cluster.
    """
    pass


class EcsManageAppError(Exception):
    """Generic errors."""
    pass
