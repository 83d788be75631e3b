from dataclasses import dataclass, field
from typing import Dict

DEFAULT_PRIMARY_HOST = "192.168.1.101"
DEFAULT_PORT = 5432
DEFAULT_USER = "postgres"
DEFAULT_DATABASE = "postgres"

DEFAULT_HOST_TABLE = {
    DEFAULT_PRIMARY_HOST: "myhost1.testmachine.com",
    "192.168.1.102": "myhost2.testmachine.com",
}


# Connection target
@dataclass(frozen=True)
class ConnectionTarget:
    host: str = field(metadata={"remark": "Database host or IP"})
    port: int = field(default=DEFAULT_PORT, metadata={"remark": "Database port"})
    user: str = field(default=DEFAULT_USER, metadata={"remark": "Database user"})
    database: str = field(default=DEFAULT_DATABASE, metadata={"remark": "Database name"})
    # repr=False keeps the credential out of logs
    password: str = field(default="", repr=False, metadata={"remark": "Database password"})

    def connect_params(self) -> dict:
        """
        Keyword arguments for psycopg2.connect
        """
        params = {
            'host': self.host,
            'port': self.port,
            'user': self.user,
            'dbname': self.database,
        }
        # an empty password lets libpq fall back to .pgpass
        if self.password:
            params['password'] = self.password
        return params

    def describe(self) -> str:
        return f"Host: {self.host}, Port: {self.port}, User: {self.user}, Database: {self.database}"


# General settings
@dataclass
class GeneralConfig:
    # log level
    log_level: str = field(default="warning", metadata={"remark": "Log level"})
    # log file path, empty for stderr only
    log_file: str = field(default="", metadata={"remark": "Log file path"})
    # text or json
    log_format: str = field(default="text", metadata={"remark": "Log format"})
    # text or html
    default_report_format: str = field(default="text", metadata={"remark": "Default report format"})
    default_report_dir: str = field(default="reports", metadata={"remark": "Default report directory"})


# Static cluster knowledge
@dataclass
class ClusterConfig:
    primary_host: str = field(default=DEFAULT_PRIMARY_HOST, metadata={"remark": "Configured primary address"})
    # static IP -> hostname table used when reverse DNS has no answer
    hosts: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HOST_TABLE),
                                  metadata={"remark": "Static IP to hostname table"})


# Contents of the optional configuration file
@dataclass
class Config:
    general: GeneralConfig = field(default_factory=GeneralConfig, metadata={"remark": "General settings"})
    cluster: ClusterConfig = field(default_factory=ClusterConfig, metadata={"remark": "Cluster settings"})


# Resolved run configuration, built once at startup
@dataclass(frozen=True)
class Configuration:
    target: ConnectionTarget
    general: GeneralConfig
    cluster: ClusterConfig
    report_format: str = "text"
    report_dir: str = "reports"
    color: bool = True
