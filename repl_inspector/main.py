import logging
import sys

import click

from repl_inspector.checks.base import ConfigurationError, DatabaseConnectionError, InspectorError
from repl_inspector.config.config_loader import REPORT_FORMATS, build_configuration, detect_local_ip, load_config
from repl_inspector.config.logging_config import configure_logging
from repl_inspector.pipelines.pg_pipeline import ReplicationPipeline

logger = logging.getLogger(__name__)

BANNER = "PostgreSQL Replication Status Checker\n===================================="


def fail(message, detail=None, color=True):
    click.echo(click.style(f"Error: {message}", fg='red') if color else f"Error: {message}", err=True)
    if detail:
        click.echo(detail, err=True)
    sys.exit(1)


@click.command(context_settings={"help_option_names": ["--help"]})
@click.option('-h', '--host', envvar='PGHOST', default=detect_local_ip, show_default="local IP", help="Database host")
@click.option('-p', '--port', envvar='PGPORT', type=int, default=5432, show_default=True, help="Database port")
@click.option('-U', '--user', envvar='PGUSER', default='postgres', show_default=True, help="Database user")
@click.option('-d', '--database', envvar='PGDATABASE', default='postgres', show_default=True, help="Database name")
@click.option('-W', '--password', envvar='PGPASSWORD', default='', show_default=False,
              help="Database password (or PGPASSWORD / .pgpass)")
@click.option('--primary-host', envvar='REPL_PRIMARY_HOST', default=None,
              help="Configured primary address shown in the cluster table")
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), default=None,
              help="Path to a YAML or TOML configuration file")
@click.option('--report-format', type=click.Choice(REPORT_FORMATS, case_sensitive=False), default=None,
              help="Format of the generated report")
@click.option('--output-report-dir', type=click.Path(file_okay=False), default=None,
              help="Directory the html report is written to")
@click.option('--log-level', envvar='REPL_LOG_LEVEL', default=None, help="Log level (debug, info, warning, error)")
@click.option('--no-color', is_flag=True, default=False, help="Disable coloured output")
def main(host, port, user, database, password, primary_host, config_path, report_format, output_report_dir,
         log_level, no_color):
    """
    Report the replication role, topology and lag of a PostgreSQL node.
    """
    color = not no_color
    click.echo(BANNER)

    # 1. configuration: flag > environment > config file > default
    try:
        configuration = build_configuration(
            host, port, user, database, password,
            config=load_config(config_path),
            primary_host=primary_host,
            report_format=report_format,
            report_dir=output_report_dir,
            log_level=log_level,
            color=color,
        )
        configure_logging(configuration.general)
    except ConfigurationError as e:
        fail(f"Invalid configuration: {e}", color=color)

    target = configuration.target
    logger.info("Inspecting %s:%s as %s", target.host, target.port, target.user)

    # 2. connect, classify, collect
    pipe = ReplicationPipeline(configuration)
    try:
        pipe.connect()
    except InspectorError as e:
        pipe.close()
        logger.error("Connectivity check failed: %s", e)
        fail("Cannot connect to database", detail=f"{target.describe()}\n{e}", color=color)

    try:
        report = pipe.execute()
        output = pipe.generate_report(report)
    except DatabaseConnectionError as e:
        logger.error("Connection lost: %s", e)
        fail(f"Lost connection to database: {e}", detail=target.describe(), color=color)
    except InspectorError as e:
        logger.error("Inspection failed: %s", e)
        fail(str(e), detail=target.describe(), color=color)
    except OSError as e:
        logger.error("Could not write report: %s", e)
        fail(f"Could not write report: {e}", color=color)
    finally:
        pipe.close()

    # 3. report
    if configuration.report_format == 'html':
        click.echo(f"HTML report written to {pipe.output_file}")
    else:
        click.echo(output)


if __name__ == "__main__":
    main()
