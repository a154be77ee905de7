__version__ = "0.2.0"


def get_version() -> str:
    return __version__
