"""
Cell formatting shared by the text and html reports.

Missing values never drop a column: the cluster table and standby status show
N/A, replica lag cells stay empty so that "no data" reads differently from 0.
"""
from repl_inspector.checks.base import NodeRole

NOT_AVAILABLE = "N/A"
NO_STANDBYS_MESSAGE = "No slaves currently connected"

CLUSTER_HEADERS = ("Database Host", "IP Address", "Hostname", "Sync Status", "Role Name", "Application Name")

REPLICA_HEADERS = ("Client Address", "State", "Sync State", "Application Name",
                   "Sent Lag", "Write Lag", "Flush Lag", "Replay Lag", "Current WAL")


def na(value):
    return NOT_AVAILABLE if value is None or value == "" else str(value)


def blank(value):
    return "" if value is None else str(value)


def format_seconds(value):
    if not value:
        return "0"
    text = f"{value:.6f}".rstrip('0').rstrip('.')
    return text or "0"


def format_timestamp(value):
    if value is None:
        return NOT_AVAILABLE
    return value.isoformat(sep=' ')


def cluster_rows(report):
    return [
        (member.endpoint, member.address, member.display_name, na(member.sync_state),
         member.role.label, na(member.application_name))
        for member in report.topology
    ]


def replica_rows(primary_status):
    return [
        (replica.client_address, blank(replica.state), blank(replica.sync_state),
         blank(replica.application_name), blank(replica.sent_lag_bytes), blank(replica.write_lag_bytes),
         blank(replica.flush_lag_bytes), blank(replica.replay_lag_bytes), blank(replica.current_wal_file))
        for replica in primary_status.connected_standbys
    ]


def standby_rows(standby_status):
    return [
        ("Lag (seconds)", format_seconds(standby_status.lag_seconds)),
        ("Lag (bytes)", na(standby_status.lag_bytes)),
        ("Last Replay Time", format_timestamp(standby_status.last_replay_timestamp)),
        ("Received WAL LSN", na(standby_status.received_wal_lsn)),
        ("Next Archive to Apply", na(standby_status.next_archive_to_apply)),
        ("Recovery Status", "In recovery" if standby_status.in_recovery else "Not in recovery"),
    ]


def summary_lines(report):
    """
    Role specific header lines of the detail section
    """
    target = report.target
    if report.role is NodeRole.PRIMARY:
        status = report.primary_status
        return [
            f"Host: {target.host}:{target.port} (Primary node in the cluster)",
            f"Current Role: {report.role.label}",
            f"Current WAL File: {na(status.current_wal_file)}",
        ]
    status = report.standby_status
    current_wal = f"LSN: {status.current_wal_lsn}" if status.current_wal_lsn else NOT_AVAILABLE
    return [
        f"Host: {target.host}:{target.port} (Replicating from {report.primary_host}:{target.port})",
        f"Current Role: {report.role.label}",
        f"Current WAL: {current_wal}",
    ]
