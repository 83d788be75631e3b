"""
psycopg2 backed SQL executor.

Every query runs in its own short transaction and comes back as a typed row;
callers never see cursors or raw tuples.
"""
import datetime
import logging
from dataclasses import dataclass
from typing import List, Optional

import psycopg2
from psycopg2.extras import RealDictCursor

from repl_inspector.checks.base import DatabaseConnectionError, QueryError, manage_transaction
from repl_inspector.config.base import ConnectionTarget

logger = logging.getLogger(__name__)

PING_SQL = "SELECT 1 AS ok"

IN_RECOVERY_SQL = "SELECT pg_is_in_recovery() AS in_recovery"

CURRENT_WAL_SQL = """
    SELECT lsn::text AS lsn, pg_walfile_name(lsn) AS wal_file
    FROM (SELECT pg_current_wal_lsn() AS lsn) AS current_position
"""

# local unix-socket walsenders have no client_addr and are left out
REPLICATION_PEERS_SQL = """
    SELECT
        host(client_addr) AS client_addr,
        state,
        sync_state,
        application_name,
        sent_lsn::text AS sent_lsn,
        write_lsn::text AS write_lsn,
        flush_lsn::text AS flush_lsn,
        replay_lsn::text AS replay_lsn,
        pg_walfile_name(replay_lsn) AS replay_wal_file
    FROM pg_stat_replication
    WHERE client_addr IS NOT NULL
"""

LAST_RECEIVED_LSN_SQL = "SELECT pg_last_wal_receive_lsn()::text AS lsn"

STANDBY_REPLAY_SQL = """
    SELECT
        pg_last_wal_receive_lsn()::text AS receive_lsn,
        pg_last_wal_replay_lsn()::text AS replay_lsn,
        pg_last_xact_replay_timestamp() AS last_replay,
        now() AS server_now,
        (SELECT min(name)
           FROM pg_ls_dir('pg_wal/archive_status') AS name
          WHERE name LIKE '%.ready') AS next_archive
"""


@dataclass(frozen=True)
class WalPosition:
    lsn: str
    wal_file: Optional[str]


@dataclass(frozen=True)
class ReplicationPeerRow:
    client_addr: str
    state: Optional[str]
    sync_state: Optional[str]
    application_name: Optional[str]
    sent_lsn: Optional[str]
    write_lsn: Optional[str]
    flush_lsn: Optional[str]
    replay_lsn: Optional[str]
    replay_wal_file: Optional[str]


@dataclass(frozen=True)
class StandbyReplayRow:
    receive_lsn: Optional[str]
    replay_lsn: Optional[str]
    last_replay: Optional[datetime.datetime]
    server_now: Optional[datetime.datetime]
    next_archive: Optional[str]


class PgExecutor:
    def __init__(self, target: ConnectionTarget):
        """
        :param target: endpoint to query
        """
        self.target = target
        self.db_connection = None

    def connect(self):
        try:
            self.db_connection = psycopg2.connect(**self.target.connect_params())
        except psycopg2.Error as e:
            raise DatabaseConnectionError(f"Cannot connect to database: {str(e).strip()}") from e
        logger.info("Connected to %s:%s", self.target.host, self.target.port)

    def close(self):
        if self.db_connection is not None:
            self.db_connection.close()
            self.db_connection = None
            logger.debug("Database connection closed")

    def _fetch(self, operation, query, many=False):
        if self.db_connection is None:
            raise DatabaseConnectionError("Database connection is not established")
        logger.debug("%s: %s", operation, " ".join(query.split()))
        try:
            with manage_transaction(self.db_connection, cursor_factory=RealDictCursor) as cursor:
                cursor.execute(query)
                if many:
                    return cursor.fetchall()
                return cursor.fetchone()
        except (psycopg2.OperationalError, psycopg2.InterfaceError) as e:
            raise DatabaseConnectionError(f"{operation}: connection lost: {str(e).strip()}") from e
        except psycopg2.Error as e:
            raise QueryError(operation, str(e).strip()) from e

    def _fetch_one(self, operation, query):
        row = self._fetch(operation, query)
        if row is None:
            raise QueryError(operation, "no rows returned")
        return row

    def ping(self):
        self._fetch_one("connectivity check", PING_SQL)

    def in_recovery(self):
        """
        Raw value of pg_is_in_recovery(); interpretation is left to the role classifier.
        """
        row = self._fetch("recovery flag", IN_RECOVERY_SQL)
        if row is None:
            return None
        return row.get("in_recovery")

    def current_wal_position(self) -> WalPosition:
        row = self._fetch_one("current WAL position", CURRENT_WAL_SQL)
        try:
            return WalPosition(lsn=row["lsn"], wal_file=row["wal_file"])
        except KeyError as e:
            raise QueryError("current WAL position", f"missing column {e}") from e

    def current_wal_file(self) -> Optional[str]:
        """
        WAL file name alone. The primary collector reads current_wal_position() instead
        so the file and the LSN come from the same statement.
        """
        return self.current_wal_position().wal_file

    def replication_peers(self) -> List[ReplicationPeerRow]:
        rows = self._fetch("replication peers", REPLICATION_PEERS_SQL, many=True)
        peers = []
        for row in rows:
            try:
                peers.append(ReplicationPeerRow(
                    client_addr=row["client_addr"],
                    state=row["state"],
                    sync_state=row["sync_state"],
                    application_name=row["application_name"],
                    sent_lsn=row["sent_lsn"],
                    write_lsn=row["write_lsn"],
                    flush_lsn=row["flush_lsn"],
                    replay_lsn=row["replay_lsn"],
                    replay_wal_file=row["replay_wal_file"],
                ))
            except KeyError as e:
                raise QueryError("replication peers", f"missing column {e}") from e
        logger.debug("Found %d replication peers", len(peers))
        return peers

    def last_received_lsn(self) -> Optional[str]:
        row = self._fetch_one("last received LSN", LAST_RECEIVED_LSN_SQL)
        return row.get("lsn")

    def standby_replay_state(self) -> StandbyReplayRow:
        row = self._fetch_one("standby replay state", STANDBY_REPLAY_SQL)
        try:
            return StandbyReplayRow(
                receive_lsn=row["receive_lsn"],
                replay_lsn=row["replay_lsn"],
                last_replay=row["last_replay"],
                server_now=row["server_now"],
                next_archive=row["next_archive"],
            )
        except KeyError as e:
            raise QueryError("standby replay state", f"missing column {e}") from e
