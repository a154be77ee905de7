from cement import Controller
from cement.utils.version import get_version_banner

from ecsmanage import get_version


VERSION_BANNER = """
ecsmanage-%s: Bulk operations on the services in AWS ECS clusters.  Use with great care.
---
%s
""" % (get_version(), get_version_banner())


class Base(Controller):
    class Meta:
        label = 'base'

        # text displayed at the top of --help output
        description = 'ecsmanage: bulk operations on the services in AWS ECS clusters.  Use with great care.'

        # controller level arguments. ex: 'ecsmanage --version'
        arguments = [
            (['--version'], {'action': 'version', 'version': VERSION_BANNER}),
            (
                ['--profile'],
                {
                    'dest': 'profile',
                    'action': 'store',
                    'default': None,
                    'help': 'AWS profile for authentication'
                }
            ),
            (
                ['-v', '--verbose'],
                {
                    'dest': 'verbose',
                    'action': 'count',
                    'default': 0,
                    'help': 'Sets the level of verbosity; repeat for more'
                }
            ),
        ]

    def _default(self):
        """Default action if no sub-command is passed."""
        self.app.args.print_help()
