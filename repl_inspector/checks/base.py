import datetime
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional

from repl_inspector.config.base import ConnectionTarget


class InspectorError(Exception):
    """Base class for all fatal inspector errors."""


class ConfigurationError(InspectorError):
    pass


class DatabaseConnectionError(InspectorError, ConnectionError):
    pass


class QueryError(InspectorError):
    def __init__(self, operation, message):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class NodeRole(Enum):
    PRIMARY = 'primary'
    STANDBY = 'standby'

    @property
    def label(self):
        if self is NodeRole.PRIMARY:
            return "Primary (Master)"
        return "Standby (Slave)"


# Peer as seen by the topology assembler
class Peer(NamedTuple):
    address: str
    sync_state: Optional[str]
    application_name: Optional[str]


@dataclass(frozen=True)
class ClusterMember:
    address: str = field(metadata={"remark": "Node IP address"})
    port: int = field(metadata={"remark": "Node port"})
    display_name: str = field(metadata={"remark": "Resolved hostname"})
    role: NodeRole = field(metadata={"remark": "Replication role"})
    sync_state: Optional[str] = field(default=None, metadata={"remark": "Sync state, None for N/A"})
    application_name: Optional[str] = field(default=None, metadata={"remark": "Application name, None for N/A"})

    @property
    def endpoint(self):
        return f"{self.address}:{self.port}"


@dataclass(frozen=True)
class StandbyReplica:
    client_address: str = field(metadata={"remark": "pg_stat_replication.client_addr"})
    state: Optional[str] = field(default=None, metadata={"remark": "WAL sender state"})
    sync_state: Optional[str] = field(default=None, metadata={"remark": "async/sync/potential/quorum"})
    application_name: Optional[str] = field(default=None, metadata={"remark": "Standby application_name"})
    # byte distances from the primary's current WAL position, None when the standby reported nothing
    sent_lag_bytes: Optional[int] = None
    write_lag_bytes: Optional[int] = None
    flush_lag_bytes: Optional[int] = None
    replay_lag_bytes: Optional[int] = None
    current_wal_file: Optional[str] = field(default=None, metadata={"remark": "WAL file of replay_lsn"})

    def as_peer(self) -> Peer:
        return Peer(self.client_address, self.sync_state, self.application_name)


@dataclass(frozen=True)
class PrimaryStatus:
    current_wal_file: Optional[str]
    current_wal_lsn: Optional[str] = None
    connected_standbys: List[StandbyReplica] = field(default_factory=list)


@dataclass(frozen=True)
class StandbyStatus:
    lag_seconds: float = 0.0
    lag_bytes: Optional[int] = None
    last_replay_timestamp: Optional[datetime.datetime] = None
    received_wal_lsn: Optional[str] = None
    next_archive_to_apply: Optional[str] = None
    in_recovery: bool = True
    # last received LSN read on its own for the report header
    current_wal_lsn: Optional[str] = None


@dataclass(frozen=True)
class ReplicationReport:
    target: ConnectionTarget
    primary_host: str
    role: NodeRole
    topology: List[ClusterMember]
    primary_status: Optional[PrimaryStatus] = None
    standby_status: Optional[StandbyStatus] = None

    def __post_init__(self):
        if self.role is NodeRole.PRIMARY and (self.primary_status is None or self.standby_status is not None):
            raise ValueError("primary report needs a PrimaryStatus and no StandbyStatus")
        if self.role is NodeRole.STANDBY and (self.standby_status is None or self.primary_status is not None):
            raise ValueError("standby report needs a StandbyStatus and no PrimaryStatus")


@contextmanager
def manage_transaction(connection, cursor_factory=None):
    if cursor_factory is not None:
        cursor = connection.cursor(cursor_factory=cursor_factory)
    else:
        cursor = connection.cursor()
    try:
        yield cursor
        connection.commit()
    except Exception:
        connection.rollback()
        raise
    finally:
        cursor.close()
