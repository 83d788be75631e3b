import logging
import os

from jinja2 import Environment, FileSystemLoader, Template

from repl_inspector.checks.base import NodeRole
from repl_inspector.reports.formatting import (CLUSTER_HEADERS, NO_STANDBYS_MESSAGE, REPLICA_HEADERS,
                                               cluster_rows, replica_rows, standby_rows, summary_lines)

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>PostgreSQL Replication Report - {{ host }}</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 20px; }
        table { border-collapse: collapse; width: 100%; margin-bottom: 20px; }
        th, td { border: 1px solid #ddd; padding: 8px; }
        th { background-color: #f2f2f2; }
        tr:nth-child(even) { background-color: #f9f9f9; }
        .role { color: #2e7d32; }
    </style>
</head>
<body>
    <h1>PostgreSQL Replication Status</h1>

    <h2>Cluster Information</h2>
    <table>
        <thead>
            <tr>{% for header in cluster_headers %}<th>{{ header }}</th>{% endfor %}</tr>
        </thead>
        <tbody>
        {% for row in cluster %}
            <tr>{% for cell in row %}<td>{{ cell }}</td>{% endfor %}</tr>
        {% endfor %}
        </tbody>
    </table>

    <h2 class="role">{{ banner }}</h2>
    <ul>
    {% for line in summary %}
        <li>{{ line }}</li>
    {% endfor %}
    </ul>

    {% if is_primary %}
        {% if replicas %}
    <h3>Detailed Slave Replication Status</h3>
    <table>
        <thead>
            <tr>{% for header in replica_headers %}<th>{{ header }}</th>{% endfor %}</tr>
        </thead>
        <tbody>
        {% for row in replicas %}
            <tr>{% for cell in row %}<td>{{ cell }}</td>{% endfor %}</tr>
        {% endfor %}
        </tbody>
    </table>
        {% else %}
    <p>{{ no_standbys }}</p>
        {% endif %}
    {% else %}
    <h3>Replication Status</h3>
    <table>
        <tbody>
        {% for label, value in standby %}
            <tr><th>{{ label }}</th><td>{{ value }}</td></tr>
        {% endfor %}
        </tbody>
    </table>
    {% endif %}
</body>
</html>
"""


class HTMLReportGenerator:
    def __init__(self, template_path=None):
        """
        :param template_path: optional jinja2 template file; the embedded template is used otherwise
        """
        if template_path and os.path.exists(template_path):
            template_dir = os.path.dirname(template_path)
            template_file = os.path.basename(template_path)
            env = Environment(loader=FileSystemLoader(template_dir), autoescape=True)
            self.template = env.get_template(template_file)
        else:
            self.template = Template(DEFAULT_TEMPLATE, autoescape=True)

    def generate(self, report, output_file=None):
        """
        Render the report as html.
        :param report: ReplicationReport
        :param output_file: optional path the html is written to
        :return: html string
        """
        is_primary = report.role is NodeRole.PRIMARY
        html_content = self.template.render(
            host=report.target.host,
            cluster_headers=CLUSTER_HEADERS,
            cluster=cluster_rows(report),
            banner="This is a MASTER database" if is_primary else "This is a STANDBY database",
            summary=summary_lines(report),
            is_primary=is_primary,
            replica_headers=REPLICA_HEADERS,
            replicas=replica_rows(report.primary_status) if is_primary else [],
            no_standbys=NO_STANDBYS_MESSAGE,
            standby=[] if is_primary else standby_rows(report.standby_status),
        )

        if output_file:
            with open(output_file, 'w', encoding='utf-8') as f:
                f.write(html_content)
            logger.info("HTML report written to %s", output_file)

        return html_content
