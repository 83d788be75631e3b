import logging

from repl_inspector.checks.base import NodeRole, QueryError, StandbyStatus
from repl_inspector.checks.role_check import parse_recovery_flag
from repl_inspector.checks.wal import lsn_diff, parse_lsn, strip_ready_suffix

logger = logging.getLogger(__name__)

CHECK_NAME = "standby replication status"


def compute_lag_seconds(receive_lsn, replay_lsn, last_replay, now) -> float:
    """
    Seconds since the last replayed transaction.
    Exactly 0 once everything received has been replayed, however old last_replay is.
    """
    if receive_lsn is not None and replay_lsn is not None and parse_lsn(receive_lsn) == parse_lsn(replay_lsn):
        return 0.0
    if last_replay is None or now is None:
        return 0.0
    # now() is the transaction start, so a replay landing after it would come out negative
    return max(0.0, (now - last_replay).total_seconds())


def collect_standby(executor, clock=None) -> StandbyStatus:
    """
    Receive/replay progress of a standby.
    :param executor: SQL executor bound to the standby
    :param clock: optional callable returning an aware datetime; the server's now() is used otherwise
    """
    current_lsn = executor.last_received_lsn()
    state = executor.standby_replay_state()

    now = clock() if clock is not None else state.server_now
    try:
        lag_seconds = compute_lag_seconds(state.receive_lsn, state.replay_lsn, state.last_replay, now)
        lag_bytes = lsn_diff(state.receive_lsn, state.replay_lsn)
    except ValueError as e:
        raise QueryError(CHECK_NAME, str(e)) from e

    # read again rather than reuse the classifier's answer
    in_recovery = parse_recovery_flag(executor.in_recovery()) is NodeRole.STANDBY
    if not in_recovery:
        logger.warning("%s left recovery while being inspected", executor.target.host)

    return StandbyStatus(
        lag_seconds=lag_seconds,
        lag_bytes=lag_bytes,
        last_replay_timestamp=state.last_replay,
        received_wal_lsn=state.receive_lsn,
        next_archive_to_apply=strip_ready_suffix(state.next_archive),
        in_recovery=in_recovery,
        current_wal_lsn=current_lsn,
    )
