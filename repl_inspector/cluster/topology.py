from typing import Iterable, List

from repl_inspector.checks.base import ClusterMember, NodeRole, Peer

# label shown for the queried node when it is a standby; not read from the server
WALRECEIVER_APPLICATION = "walreceiver"


def assemble_topology(target, role: NodeRole, peers: Iterable[Peer], primary_host: str, resolver) -> List[ClusterMember]:
    """
    Build the cluster table rows.
    :param target: ConnectionTarget of the queried node
    :param role: live role of the queried node
    :param peers: (address, sync_state, application_name) of standbys seen by a primary
    :param primary_host: statically configured primary address
    :param resolver: NameResolver used for display names
    :return: ordered members; the configured primary and the queried node are always present, even if they are the same host
    """
    # 1. configured primary, whatever the live answer is
    members = [
        ClusterMember(
            address=primary_host,
            port=target.port,
            display_name=resolver.resolve(primary_host),
            role=NodeRole.PRIMARY,
        )
    ]

    # 2. the node we are connected to
    members.append(
        ClusterMember(
            address=target.host,
            port=target.port,
            display_name=resolver.resolve(target.host),
            role=role,
            application_name=WALRECEIVER_APPLICATION if role is NodeRole.STANDBY else None,
        )
    )

    # 3. standbys attached to a primary; a standby does not list its siblings
    if role is NodeRole.PRIMARY:
        for address, sync_state, application_name in peers:
            members.append(
                ClusterMember(
                    address=address,
                    port=target.port,
                    display_name=resolver.resolve(address),
                    role=NodeRole.STANDBY,
                    sync_state=sync_state,
                    application_name=application_name,
                )
            )

    return members
