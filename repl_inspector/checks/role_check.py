import logging

from repl_inspector.checks.base import NodeRole, QueryError

logger = logging.getLogger(__name__)

CHECK_NAME = "role classification"

# textual forms of a false recovery flag ('f' is what psql prints)
FALSE_FLAGS = ('f', 'false')


def parse_recovery_flag(value) -> NodeRole:
    """
    Map the raw pg_is_in_recovery() value onto a role.
    False is the only primary answer; anything else non-empty is a standby.
    """
    if value is None:
        raise QueryError(CHECK_NAME, "pg_is_in_recovery() returned nothing")
    if isinstance(value, bool):
        return NodeRole.STANDBY if value else NodeRole.PRIMARY
    text = str(value).strip()
    if not text:
        raise QueryError(CHECK_NAME, "pg_is_in_recovery() returned an empty value")
    if text.lower() in FALSE_FLAGS:
        return NodeRole.PRIMARY
    return NodeRole.STANDBY


def classify(executor) -> NodeRole:
    role = parse_recovery_flag(executor.in_recovery())
    logger.info("Node %s classified as %s", executor.target.host, role.value)
    return role
