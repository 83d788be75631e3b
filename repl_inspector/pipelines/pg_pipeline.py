import logging
import os

from repl_inspector.checks.base import NodeRole, ReplicationReport
from repl_inspector.checks.executor import PgExecutor
from repl_inspector.checks.primary_check import collect_primary
from repl_inspector.checks.role_check import classify
from repl_inspector.checks.standby_check import collect_standby
from repl_inspector.cluster.resolver import default_resolver
from repl_inspector.cluster.topology import assemble_topology
from repl_inspector.config.base import Configuration
from repl_inspector.pipelines.base import PipelineManager
from repl_inspector.reports.html_report import HTMLReportGenerator
from repl_inspector.reports.text_report import TextReportGenerator

logger = logging.getLogger(__name__)


class ReplicationPipeline(PipelineManager):
    def __init__(self, configuration: Configuration, resolver=None, clock=None):
        """
        Replication inspection of a single PostgreSQL node
        :param configuration: resolved run configuration
        :param resolver: NameResolver, defaults to reverse DNS then the configured host table
        :param clock: optional callable returning "now" for standby lag; server time otherwise
        """
        self.configuration = configuration
        self.target = configuration.target
        self.resolver = resolver if resolver else default_resolver(configuration.cluster.hosts)
        self.clock = clock
        self.executor = None
        self.output_file = None

    def connect(self):
        """
        Open the connection and run the connectivity check; failures abort before any classification
        """
        self.executor = PgExecutor(self.target)
        self.executor.connect()
        self.executor.ping()

    def execute(self) -> ReplicationReport:
        role = classify(self.executor)
        primary_host = self.configuration.cluster.primary_host

        if role is NodeRole.PRIMARY:
            primary_status = collect_primary(self.executor)
            peers = [replica.as_peer() for replica in primary_status.connected_standbys]
            topology = assemble_topology(self.target, role, peers, primary_host, self.resolver)
            return ReplicationReport(target=self.target, primary_host=primary_host, role=role,
                                     topology=topology, primary_status=primary_status)

        standby_status = collect_standby(self.executor, clock=self.clock)
        topology = assemble_topology(self.target, role, [], primary_host, self.resolver)
        return ReplicationReport(target=self.target, primary_host=primary_host, role=role,
                                 topology=topology, standby_status=standby_status)

    def generate_report(self, results: ReplicationReport) -> str:
        """
        :param results: assembled report model
        :return: report text (html source for the html format)
        """
        report_format = self.configuration.report_format
        if report_format == 'text':
            return TextReportGenerator(color=self.configuration.color).generate(results)
        elif report_format == 'html':
            report_dir = self.configuration.report_dir
            os.makedirs(report_dir, exist_ok=True)
            self.output_file = os.path.join(report_dir, f"{self.target.host}_replication_report.html")
            return HTMLReportGenerator().generate(results, output_file=self.output_file)
        else:
            raise ValueError(f"Unsupported report format: {report_format}")

    def close(self):
        if self.executor is not None:
            self.executor.close()
            self.executor = None
