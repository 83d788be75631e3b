import datetime

import pytest

from repl_inspector.checks.base import NodeRole, PrimaryStatus, ReplicationReport, StandbyReplica, StandbyStatus
from repl_inspector.cluster.topology import assemble_topology
from repl_inspector.reports.formatting import format_seconds
from repl_inspector.reports.html_report import HTMLReportGenerator
from repl_inspector.reports.text_report import TextReportGenerator

UTC = datetime.timezone.utc


def status_line(label, value):
    return f"{label:<25} : {value}"


def primary_report(target, resolver, replicas):
    topology = assemble_topology(target, NodeRole.PRIMARY, [r.as_peer() for r in replicas], "192.168.1.101", resolver)
    status = PrimaryStatus(current_wal_file="000000010000000000000003", current_wal_lsn="0/3000000",
                           connected_standbys=replicas)
    return ReplicationReport(target=target, primary_host="192.168.1.101", role=NodeRole.PRIMARY,
                             topology=topology, primary_status=status)


def standby_report(target, resolver, status):
    topology = assemble_topology(target, NodeRole.STANDBY, [], "192.168.1.101", resolver)
    return ReplicationReport(target=target, primary_host="192.168.1.101", role=NodeRole.STANDBY,
                             topology=topology, standby_status=status)


def test_primary_without_standbys(target, resolver):
    text = TextReportGenerator(color=False).generate(primary_report(target, resolver, []))

    assert "This is a MASTER database" in text
    assert "Current WAL File: 000000010000000000000003" in text
    assert "No slaves currently connected" in text
    assert "Detailed Slave Replication Status" not in text


def test_cluster_table_shows_na_for_static_primary(target, resolver):
    lines = TextReportGenerator(color=False).generate(primary_report(target, resolver, [])).splitlines()
    static_row = [line for line in lines if line.startswith("192.168.1.101:5432")][0]
    cells = [cell.strip() for cell in static_row.split("|")]

    assert cells == ["192.168.1.101:5432", "192.168.1.101", "myhost1.testmachine.com", "N/A",
                     "Primary (Master)", "N/A"]


def test_primary_detail_row_and_empty_lag_cells(target, resolver):
    replicas = [
        StandbyReplica("10.0.0.5", "streaming", "async", "node2", 0, 0, 0, 0, "000000010000000000000003"),
        StandbyReplica("10.0.0.6", "startup", "async", "node3"),
    ]
    lines = TextReportGenerator(color=False).generate(primary_report(target, resolver, replicas)).splitlines()
    detail = lines[lines.index("Detailed Slave Replication Status:") + 3:]

    first = [cell.strip() for cell in detail[0].split("|")]
    second = [cell.strip() for cell in detail[1].split("|")]
    assert first == ["10.0.0.5", "streaming", "async", "node2", "0", "0", "0", "0", "000000010000000000000003"]
    assert second == ["10.0.0.6", "startup", "async", "node3", "", "", "", "", ""]
    # columns line up even when cells are empty
    assert len(detail[0]) == len(detail[1])


def test_standby_section(target, resolver):
    status = StandbyStatus(lag_seconds=12.5, lag_bytes=4096,
                           last_replay_timestamp=datetime.datetime(2025, 4, 8, 11, 59, 47, tzinfo=UTC),
                           received_wal_lsn="0/5000000", next_archive_to_apply=None, in_recovery=True,
                           current_wal_lsn="0/5000000")
    text = TextReportGenerator(color=False).generate(standby_report(target, resolver, status))

    assert "This is a STANDBY database" in text
    assert "Host: 10.0.0.1:5432 (Replicating from 192.168.1.101:5432)" in text
    assert "Current WAL: LSN: 0/5000000" in text
    assert status_line("Lag (seconds)", "12.5") in text
    assert status_line("Lag (bytes)", "4096") in text
    assert status_line("Last Replay Time", "2025-04-08 11:59:47+00:00") in text
    assert status_line("Next Archive to Apply", "N/A") in text
    assert status_line("Recovery Status", "In recovery") in text
    assert "walreceiver" in text


def test_standby_without_data(target, resolver):
    text = TextReportGenerator(color=False).generate(standby_report(target, resolver, StandbyStatus(in_recovery=False)))

    assert "Current WAL: N/A" in text
    assert status_line("Lag (seconds)", "0") in text
    assert status_line("Last Replay Time", "N/A") in text
    assert status_line("Recovery Status", "Not in recovery") in text


def test_color_wraps_banner_only(target, resolver):
    text = TextReportGenerator(color=True).generate(primary_report(target, resolver, []))
    assert "\x1b[32mThis is a MASTER database\x1b[0m" in text
    assert "\x1b[" not in text.split("This is a MASTER database")[0]


def test_format_seconds():
    assert format_seconds(0) == "0"
    assert format_seconds(0.0) == "0"
    assert format_seconds(3600.0) == "3600"
    assert format_seconds(1.2345678) == "1.234568"


def test_html_report_written_to_file(tmp_path, target, resolver):
    replicas = [StandbyReplica("10.0.0.5", "streaming", "async", "node<2>", 0, 0, 0, 0, None)]
    output_file = tmp_path / "report.html"
    html = HTMLReportGenerator().generate(primary_report(target, resolver, replicas), output_file=str(output_file))

    assert output_file.read_text(encoding="utf-8") == html
    assert "This is a MASTER database" in html
    assert "<td>10.0.0.5</td>" in html
    assert "node&lt;2&gt;" in html


def test_html_report_standby_and_no_standbys(target, resolver):
    html = HTMLReportGenerator().generate(primary_report(target, resolver, []))
    assert "No slaves currently connected" in html

    html = HTMLReportGenerator().generate(standby_report(target, resolver, StandbyStatus()))
    assert "This is a STANDBY database" in html
    assert "<th>Lag (seconds)</th><td>0</td>" in html


def test_report_requires_matching_status(target):
    with pytest.raises(ValueError):
        ReplicationReport(target=target, primary_host="192.168.1.101", role=NodeRole.PRIMARY, topology=[],
                          standby_status=StandbyStatus())


def test_html_report_with_custom_template(tmp_path, target, resolver):
    template = tmp_path / "report.html.j2"
    template.write_text("{{ banner }} on {{ host }}: {{ cluster | length }} members")
    html = HTMLReportGenerator(template_path=str(template)).generate(primary_report(target, resolver, []))
    assert html == "This is a MASTER database on 10.0.0.1: 2 members"
