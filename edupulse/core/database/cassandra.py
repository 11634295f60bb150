"""Cassandra connection and schema management.

Provides:
- Cluster/session lifecycle
- Keyspace and table initialization
"""

import structlog
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster, Session
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy

from edupulse.config.settings import get_settings
from edupulse.courses.models import COURSES_TABLES_CQL
from edupulse.progress.models import PROGRESS_TABLES_CQL
from edupulse.users.models import USERS_TABLES_CQL


logger = structlog.get_logger(__name__)


class CassandraConnection:
    """Cassandra connection manager.

    Holds a single cluster and session for the process.
    """

    _cluster: Cluster | None = None
    _session: Session | None = None

    @classmethod
    def connect(cls) -> Session:
        """Establish the session, reusing an existing one.

        Raises:
            ConnectionError: If the cluster cannot be reached
        """
        if cls._session is not None:
            return cls._session

        settings = get_settings()

        auth_provider = None
        if settings.cassandra_username and settings.cassandra_password:
            auth_provider = PlainTextAuthProvider(
                username=settings.cassandra_username,
                password=settings.cassandra_password,
            )

        cls._cluster = Cluster(
            contact_points=settings.cassandra_hosts,
            port=settings.cassandra_port,
            auth_provider=auth_provider,
            protocol_version=settings.cassandra_protocol_version,
            load_balancing_policy=TokenAwarePolicy(
                DCAwareRoundRobinPolicy(local_dc=settings.cassandra_datacenter)
            ),
            connect_timeout=settings.cassandra_connect_timeout,
        )

        try:
            cls._session = cls._cluster.connect()
        except Exception as e:
            logger.error("cassandra_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to Cassandra: {e}") from e

        cls._session.default_timeout = settings.cassandra_request_timeout
        logger.info(
            "cassandra_connected",
            hosts=settings.cassandra_hosts,
            port=settings.cassandra_port,
        )
        return cls._session

    @classmethod
    def disconnect(cls) -> None:
        """Close the session and the cluster."""
        if cls._session is not None:
            cls._session.shutdown()
            cls._session = None

        if cls._cluster is not None:
            cls._cluster.shutdown()
            cls._cluster = None
            logger.info("cassandra_disconnected")


def init_keyspace(session: Session, keyspace: str, replication_factor: int) -> None:
    """Create the keyspace if it does not exist.

    Production keyspaces use NetworkTopologyStrategy in the configured
    datacenter; everything else uses SimpleStrategy.
    """
    settings = get_settings()

    if settings.is_production:
        replication = (
            "'class': 'NetworkTopologyStrategy', "
            f"'{settings.cassandra_datacenter}': {replication_factor}"
        )
    else:
        replication = (
            f"'class': 'SimpleStrategy', 'replication_factor': {replication_factor}"
        )

    cql = f"""
        CREATE KEYSPACE IF NOT EXISTS {keyspace}
        WITH replication = {{{replication}}}
        AND durable_writes = true
    """
    session.execute(cql)
    logger.info("keyspace_ready", keyspace=keyspace)


def init_tables(session: Session, keyspace: str) -> None:
    """Create every application table in ``keyspace``."""
    for cql_template in (*USERS_TABLES_CQL, *COURSES_TABLES_CQL, *PROGRESS_TABLES_CQL):
        session.execute(cql_template.format(keyspace=keyspace))

    logger.info("tables_ready", keyspace=keyspace)


def init_cassandra() -> Session:
    """Connect and make sure the keyspace and tables exist."""
    settings = get_settings()

    session = CassandraConnection.connect()
    init_keyspace(
        session, settings.cassandra_keyspace, settings.cassandra_replication_factor
    )
    session.set_keyspace(settings.cassandra_keyspace)
    init_tables(session, settings.cassandra_keyspace)

    logger.info("cassandra_initialized", keyspace=settings.cassandra_keyspace)
    return session


def shutdown_cassandra() -> None:
    """Shutdown the Cassandra connection."""
    CassandraConnection.disconnect()
