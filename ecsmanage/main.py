import logging

import boto3
import colorlog
from cement import App, init_defaults
from cement.core.exc import CaughtSignal

from .controllers import Base, ECSServices
from .core.sync import DEFAULT_PAUSE
from .exceptions import EcsManageAppError

# configuration defaults
CONFIG = init_defaults('ecsmanage')
CONFIG['ecsmanage']['pause'] = DEFAULT_PAUSE
CONFIG['ecsmanage']['backoff_initial_interval'] = 0.5
CONFIG['ecsmanage']['backoff_multiplier'] = 1.5
CONFIG['ecsmanage']['backoff_max_interval'] = 60.0
CONFIG['ecsmanage']['backoff_randomization_factor'] = 0.5

LIBRARY_LOG_FORMAT = '%(log_color)s%(asctime)s (%(levelname)s) %(name)s : %(message)s'


def post_arg_parse_set_verbosity(app: "EcsManageApp") -> None:
    """
    After parsing arguments, turn ``-v`` flags into log levels: one gets our own debug
    logging, two or more also gets botocore's.

    Our library modules log to plain ``ecsmanage.*`` loggers, whose records lack the
    extra fields cement's own formatters need, so they get a colorlog handler of their own.

    Args:
        app: our EcsManageApp object
    """
    verbose = getattr(app.pargs, 'verbose', 0) or 0
    if verbose >= 1:
        app.log.set_level('DEBUG')
    if verbose >= 2:
        boto3.set_stream_logger('botocore', logging.DEBUG)
    handler = logging.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(LIBRARY_LOG_FORMAT))
    library_logger = logging.getLogger('ecsmanage')
    library_logger.setLevel(logging.DEBUG if verbose >= 1 else logging.INFO)
    library_logger.addHandler(handler)
    app.extend('library_log_handler', handler)
    app.log.debug('verbosity set to {}'.format(verbose))


def pre_close_remove_library_log_handler(app: "EcsManageApp") -> None:
    handler = getattr(app, 'library_log_handler', None)
    if handler is not None:
        logging.getLogger('ecsmanage').removeHandler(handler)
        handler.close()

# ------------------
# The cement app
# ------------------

class EcsManageApp(App):
    """ecsmanage primary application."""

    class Meta:
        label = 'ecsmanage'

        config_defaults = CONFIG

        # call sys.exit() on close
        exit_on_close = True

        # load additional framework extensions
        extensions = [
            'yaml',
            'colorlog',
            'print',
        ]

        # configuration handler
        config_handler = 'yaml'

        # configuration file suffix
        config_file_suffix = '.yml'

        # handlers
        log_handler = 'colorlog'

        # register handlers
        handlers = [
            Base,
            ECSServices,
        ]

        # register hooks
        hooks = [
            ('post_argument_parsing', post_arg_parse_set_verbosity),
            ('pre_close', pre_close_remove_library_log_handler),
        ]


# ==========================================
# entrypoint
# ==========================================


def main():
    with EcsManageApp() as app:
        try:
            app.run()

        except EcsManageAppError as e:
            print('EcsManageAppError > %s' % e.args[0])
            app.exit_code = 1

            if app.debug is True:
                import traceback
                traceback.print_exc()

        except CaughtSignal as e:
            # Default Cement signals are SIGINT and SIGTERM, exit 0 (non-error)
            print('\n%s' % e)
            app.exit_code = 0


if __name__ == '__main__':
    main()
