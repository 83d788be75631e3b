import click

from repl_inspector.checks.base import NodeRole
from repl_inspector.reports.formatting import (CLUSTER_HEADERS, NO_STANDBYS_MESSAGE, REPLICA_HEADERS,
                                               cluster_rows, replica_rows, standby_rows, summary_lines)

CLUSTER_WIDTHS = (25, 15, 25, 15, 20, 20)
REPLICA_WIDTHS = (15, 10, 12, 17, 12, 12, 12, 12, 24)
STATUS_LABEL_WIDTH = 25


def format_row(values, widths):
    return " | ".join(f"{value:<{width}}" for value, width in zip(values, widths))


def format_table(headers, rows, widths):
    lines = [format_row(headers, widths), format_row(["-" * width for width in widths], widths)]
    lines.extend(format_row(row, widths) for row in rows)
    return lines


class TextReportGenerator:
    def __init__(self, color=True):
        """
        :param color: wrap the role banner in ANSI colours
        """
        self.color = color

    def _banner(self, text):
        return click.style(text, fg='green') if self.color else text

    def generate(self, report):
        """
        Cluster table followed by the role specific section
        :param report: ReplicationReport
        :return: report text
        """
        lines = ["Cluster Information:"]
        lines.extend(format_table(CLUSTER_HEADERS, cluster_rows(report), CLUSTER_WIDTHS))
        lines.append("")

        if report.role is NodeRole.PRIMARY:
            lines.append(self._banner("This is a MASTER database"))
            lines.extend(summary_lines(report))
            lines.append("Checking connected slaves...")
            rows = replica_rows(report.primary_status)
            if not rows:
                lines.append(NO_STANDBYS_MESSAGE)
            else:
                lines.append("")
                lines.append("Detailed Slave Replication Status:")
                lines.extend(format_table(REPLICA_HEADERS, rows, REPLICA_WIDTHS))
        else:
            lines.append(self._banner("This is a STANDBY database"))
            lines.extend(summary_lines(report))
            lines.append("")
            lines.append("Replication Status:")
            for label, value in standby_rows(report.standby_status):
                lines.append(f"{label:<{STATUS_LABEL_WIDTH}} : {value}")

        return "\n".join(lines)
