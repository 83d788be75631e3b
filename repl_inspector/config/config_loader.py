import os
import socket
from dataclasses import replace

import toml
import yaml

from repl_inspector.checks.base import ConfigurationError
from repl_inspector.config.base import (ClusterConfig, Config, Configuration, ConnectionTarget, DEFAULT_HOST_TABLE,
                                        GeneralConfig)

REPORT_FORMATS = ('text', 'html')
LOG_FORMATS = ('text', 'json')


def _check_file(file_path):
    if not os.path.exists(file_path):
        raise ConfigurationError(f"The file '{file_path}' does not exist.")
    if not os.access(file_path, os.R_OK):
        raise ConfigurationError(f"The file '{file_path}' is not readable.")
    if os.path.getsize(file_path) == 0:
        raise ConfigurationError(f"The file '{file_path}' is empty.")


def load_config_from_file_toml(file_path) -> dict:
    """
    Load a TOML configuration file.
    :param file_path: path of the file
    :return: raw configuration dict
    """
    _check_file(file_path)
    try:
        return toml.load(file_path)
    except toml.TomlDecodeError as e:
        raise ConfigurationError(f"The file '{file_path}' is not a valid TOML file. {str(e)}") from e


def load_config_from_file_yml(file_path) -> dict:
    """
    Load a YAML configuration file.
    :param file_path: path of the file
    :return: raw configuration dict
    """
    _check_file(file_path)
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"The file '{file_path}' is not a valid YAML file. {str(e)}") from e


def parse_config(data: dict) -> Config:
    """
    Turn the raw file contents into a Config object, filling in defaults.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration root must be a mapping")

    general_data = data.get("general") or {}
    cluster_data = data.get("cluster") or {}
    if not isinstance(general_data, dict) or not isinstance(cluster_data, dict):
        raise ConfigurationError("'general' and 'cluster' sections must be mappings")

    general_config = GeneralConfig(
        log_level=str(general_data.get("log_level", "warning")),
        log_file=str(general_data.get("log_file", "") or ""),
        log_format=str(general_data.get("log_format", "text")).lower(),
        default_report_format=str(general_data.get("default_report_format", "text")).lower(),
        default_report_dir=str(general_data.get("default_report_dir", "reports")),
    )
    if general_config.log_format not in LOG_FORMATS:
        raise ConfigurationError(f"Unsupported log format: {general_config.log_format}")
    if general_config.default_report_format not in REPORT_FORMATS:
        raise ConfigurationError(f"Unsupported report format: {general_config.default_report_format}")

    hosts = cluster_data.get("hosts", DEFAULT_HOST_TABLE)
    if not isinstance(hosts, dict):
        raise ConfigurationError("'cluster.hosts' must map IP addresses to hostnames")

    cluster_config = ClusterConfig(
        primary_host=str(cluster_data.get("primary_host", ClusterConfig.primary_host)),
        hosts={str(ip): str(name) for ip, name in hosts.items()},
    )
    return Config(general=general_config, cluster=cluster_config)


def load_config(file_path=None) -> Config:
    """
    Load the optional configuration file, picking the parser by extension.
    Without a file every setting keeps its default.
    """
    if not file_path:
        return Config()
    extension = os.path.splitext(file_path)[1].lower()
    if extension in ('.yml', '.yaml'):
        return parse_config(load_config_from_file_yml(file_path))
    elif extension == '.toml':
        return parse_config(load_config_from_file_toml(file_path))
    raise ConfigurationError(f"Unsupported configuration file type: '{file_path}'")


def detect_local_ip() -> str:
    """
    First non-loopback IPv4 address of this machine, 'localhost' when there is none.
    """
    try:
        addresses = socket.gethostbyname_ex(socket.gethostname())[2]
    except OSError:
        return "localhost"
    for address in addresses:
        if not address.startswith("127."):
            return address
    return "localhost"


def build_configuration(host, port, user, database, password, config=None, primary_host=None,
                        report_format=None, report_dir=None, log_level=None, color=True) -> Configuration:
    """
    Merge command line values (already resolved against environment variables)
    with the configuration file and built-in defaults.
    Precedence: flag > environment variable > configuration file > default.
    """
    config = config if config else Config()
    if port is not None and not 0 < int(port) < 65536:
        raise ConfigurationError(f"Invalid port: {port}")

    target = ConnectionTarget(
        host=host or detect_local_ip(),
        port=int(port) if port is not None else ConnectionTarget.port,
        user=user or ConnectionTarget.user,
        database=database or ConnectionTarget.database,
        password=password or "",
    )

    cluster = config.cluster
    if primary_host:
        cluster = replace(cluster, primary_host=primary_host)

    general = config.general
    if log_level:
        general = replace(general, log_level=log_level)

    report_format = (report_format or general.default_report_format).lower()
    if report_format not in REPORT_FORMATS:
        raise ConfigurationError(f"Unsupported report format: {report_format}")

    return Configuration(
        target=target,
        general=general,
        cluster=cluster,
        report_format=report_format,
        report_dir=report_dir or general.default_report_dir,
        color=color,
    )
