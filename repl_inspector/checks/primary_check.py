import logging

from repl_inspector.checks.base import PrimaryStatus, QueryError, StandbyReplica
from repl_inspector.checks.wal import lsn_diff

logger = logging.getLogger(__name__)

CHECK_NAME = "primary replication status"


def build_replica(row, base_lsn) -> StandbyReplica:
    """
    Turn one pg_stat_replication row into a StandbyReplica.
    :param row: ReplicationPeerRow
    :param base_lsn: primary position every lag of this batch is measured from
    """
    try:
        return StandbyReplica(
            client_address=row.client_addr,
            state=row.state,
            sync_state=row.sync_state,
            application_name=row.application_name,
            sent_lag_bytes=lsn_diff(base_lsn, row.sent_lsn),
            write_lag_bytes=lsn_diff(base_lsn, row.write_lsn),
            flush_lag_bytes=lsn_diff(base_lsn, row.flush_lsn),
            replay_lag_bytes=lsn_diff(base_lsn, row.replay_lsn),
            current_wal_file=row.replay_wal_file,
        )
    except ValueError as e:
        raise QueryError(CHECK_NAME, f"bad LSN from {row.client_addr}: {e}") from e


def collect_primary(executor) -> PrimaryStatus:
    """
    Current WAL file plus lag of every network-attached standby.
    The primary position is read once, before the peers, and shared by all rows.
    """
    position = executor.current_wal_position()
    if not position.lsn:
        raise QueryError(CHECK_NAME, "pg_current_wal_lsn() returned nothing")

    rows = executor.replication_peers()
    replicas = [build_replica(row, position.lsn) for row in rows if row.client_addr]
    if not replicas:
        logger.info("No slaves currently connected")
    else:
        logger.info("Collected %d connected standbys against %s", len(replicas), position.lsn)

    return PrimaryStatus(
        current_wal_file=position.wal_file,
        current_wal_lsn=position.lsn,
        connected_standbys=replicas,
    )
