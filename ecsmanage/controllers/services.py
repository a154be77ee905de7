import json
from typing import Any, Callable, Dict, Optional

from cement import Controller, ex
import click

from ecsmanage.core.aws import AWSControlPlane
from ecsmanage.core.models import Service
from ecsmanage.core.retry import RetryPolicy
from ecsmanage.core.sync import (
    ClusterHandle,
    DesiredCountModification,
    diff,
    sync,
    update_all,
)
from ecsmanage.renderers.table import TableRenderer

from .utils import handle_model_exceptions


CLUSTER_ARGUMENTS = [
    (['cluster'], {'help': 'The name of the ECS cluster'}),
    (['region'], {'help': 'The AWS region of the cluster'}),
]

SOURCE_DESTINATION_ARGUMENTS = [
    (['source_cluster'], {'help': 'The name of the source ECS cluster'}),
    (['source_region'], {'help': 'The AWS region of the source cluster'}),
    (['destination_cluster'], {'help': 'The name of the destination ECS cluster'}),
    (['destination_region'], {'help': 'The AWS region of the destination cluster'}),
]

PAUSE_ARGUMENT = (
    ['--pause'],
    {
        'help': 'Seconds to wait between each create or update call.  Defaults to the "pause" config setting.',
        'action': 'store',
        'default': None,
        'type': float,
        'dest': 'pause'
    }
)

#: ``export`` property name -> how to get it from a Service
EXPORTABLE_PROPERTIES: Dict[str, Callable[[Service], Any]] = {
    'desired-count': lambda s: s.desired_count,
    'running-count': lambda s: s.running_count,
    'task-definition': lambda s: s.task_definition,
}


class ECSServices(Controller):

    class Meta:
        label = 'services'
        description = 'Do operations on all services within a cluster'
        help = 'Do operations on all services within a cluster'
        stacked_on = 'base'
        stacked_type = 'nested'

    info_ordering: str = 'Service'
    info_result_columns: Dict[str, Any] = {
        'Service': 'name',
        'Task Definition': {'key': 'task_definition', 'default': ''},
        'D': {'key': 'desired_count', 'default': ''},
        'R': {'key': 'running_count', 'default': ''},
    }

    def _default(self):
        self.app.args.print_help()

    # -------------------------
    # Helpers
    # -------------------------

    @property
    def policy(self) -> RetryPolicy:
        return RetryPolicy.from_config(self.app.config)

    @property
    def pause(self) -> float:
        pause: Optional[float] = getattr(self.app.pargs, 'pause', None)
        if pause is None:
            pause = float(self.app.config.get('ecsmanage', 'pause'))
        return pause

    def cluster(self, name: str, region: str) -> ClusterHandle:
        self.app.log.debug('building control plane for {} in {}'.format(name, region))
        client = AWSControlPlane.new(region, profile=self.app.pargs.profile)
        return ClusterHandle(name, client, policy=self.policy)

    # -------------------------
    # Commands
    # -------------------------

    @ex(
        help='Useful information about services',
        arguments=CLUSTER_ARGUMENTS
    )
    @handle_model_exceptions
    def info(self):
        cluster = self.cluster(self.app.pargs.cluster, self.app.pargs.region)
        renderer = TableRenderer(columns=self.info_result_columns, ordering=self.info_ordering)
        self.app.print(renderer.render(cluster.list_services()))

    @ex(
        help='Services that have issues (mainly broken references)',
        arguments=CLUSTER_ARGUMENTS
    )
    @handle_model_exceptions
    def audit(self):
        cluster = self.cluster(self.app.pargs.cluster, self.app.pargs.region)
        auditor = cluster.auditor()
        for service in cluster.list_services():
            findings = auditor.audit(service)
            if findings:
                self.app.print('{} [{}]'.format(service.name, ', '.join(findings)))

    @ex(
        help='List services that are in the source cluster, but not in the destination cluster (by name)',
        arguments=SOURCE_DESTINATION_ARGUMENTS
    )
    @handle_model_exceptions
    def compare(self):
        source = self.cluster(self.app.pargs.source_cluster, self.app.pargs.source_region)
        destination = self.cluster(self.app.pargs.destination_cluster, self.app.pargs.destination_region)
        source_only = diff(source, destination)
        lines = ['Not in destination:']
        lines.extend('{}/{}'.format(source.name, service.name) for service in source_only)
        lines.append('Total: {}'.format(len(source_only)))
        self.app.print('\n'.join(lines))

    @ex(
        help='Create the healthy services in the source cluster that are missing from the destination cluster',
        arguments=SOURCE_DESTINATION_ARGUMENTS + [
            (
                ['role_suffix'],
                {
                    'help': "The role to use for new services is '${destination_cluster}-${role_suffix}'",
                    'nargs': '?',
                    'default': None
                }
            ),
            PAUSE_ARGUMENT,
        ]
    )
    @handle_model_exceptions
    def sync(self):
        source = self.cluster(self.app.pargs.source_cluster, self.app.pargs.source_region)
        destination = self.cluster(self.app.pargs.destination_cluster, self.app.pargs.destination_region)
        report = sync(source, destination, role_suffix=self.app.pargs.role_suffix, pause=self.pause)
        lines = []
        for name in report.created:
            lines.append(click.style('Created {}/{}'.format(destination.name, name), fg='green'))
        for name, findings in report.skipped.items():
            lines.append(click.style(
                'Skipped {}/{} [{}]'.format(source.name, name, ', '.join(findings)),
                fg='yellow'
            ))
        for name in report.failed:
            lines.append(click.style('Failed {}/{}'.format(destination.name, name), fg='red'))
        lines.append('Created: {}  Skipped: {}  Failed: {}'.format(
            len(report.created),
            len(report.skipped),
            len(report.failed)
        ))
        self.app.print('\n'.join(lines))
        if report.failed:
            self.app.exit_code = 1

    @ex(
        help='Print a property of every service as a JSON object keyed by service name',
        arguments=CLUSTER_ARGUMENTS + [
            (['property'], {'help': 'The property to export', 'choices': list(EXPORTABLE_PROPERTIES.keys())}),
        ]
    )
    @handle_model_exceptions
    def export(self):
        cluster = self.cluster(self.app.pargs.cluster, self.app.pargs.region)
        getter = EXPORTABLE_PROPERTIES[self.app.pargs.property]
        values = {service.name: getter(service) for service in cluster.list_services()}
        self.app.print(json.dumps(values, indent=2))

    @ex(
        help='Make changes to every service in a cluster',
        arguments=CLUSTER_ARGUMENTS + [
            (['modification'], {'help': 'What to change', 'choices': ['desired-count']}),
            (
                ['value'],
                {'help': 'A count for every service, or the path to a JSON file of service name to count'}
            ),
            PAUSE_ARGUMENT,
        ]
    )
    @handle_model_exceptions
    def update(self):
        modification = DesiredCountModification.from_argument(self.app.pargs.value)
        cluster = self.cluster(self.app.pargs.cluster, self.app.pargs.region)
        updated = update_all(cluster, modification, pause=self.pause)
        for service in updated:
            self.app.print(click.style(
                'Set desired count for {}/{} to {}.'.format(cluster.name, service.name, service.desired_count),
                fg='green'
            ))
