"""
ScyllaDB session management

One driver session per event loop, created lazily and reused across requests.
Blocking driver calls are pushed to worker threads by the callers
(`anyio.to_thread.run_sync`).

Usage:
    session = await get_scylla_session()
    result = await anyio.to_thread.run_sync(partial(session.execute, query, params))
"""

import asyncio
from functools import partial

import anyio.to_thread
from cassandra import ConsistencyLevel
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import EXEC_PROFILE_DEFAULT, Cluster, ExecutionProfile, Session
from cassandra.policies import ExponentialReconnectionPolicy, WhiteListRoundRobinPolicy
from cassandra.query import SimpleStatement

from session_booking.platform.config.core_setting import settings
from session_booking.platform.logging.loguru_io import Logger


# Global sessions per event loop
scylla_sessions: dict[int, Session] = {}


def create_cluster() -> Cluster:
    """
    Create the ScyllaDB cluster object

    - WhiteList policy: only talk to the configured contact points (no Docker IP discovery)
    - LOCAL_QUORUM for regular reads/writes; lightweight transactions add LOCAL_SERIAL
      per statement
    """
    load_balancing_policy = WhiteListRoundRobinPolicy(settings.SCYLLA_CONTACT_POINTS)

    auth_provider = PlainTextAuthProvider(
        username=settings.SCYLLA_USERNAME, password=settings.SCYLLA_PASSWORD.get_secret_value()
    )

    default_profile = ExecutionProfile(
        load_balancing_policy=load_balancing_policy,
        consistency_level=ConsistencyLevel.LOCAL_QUORUM,
        serial_consistency_level=ConsistencyLevel.LOCAL_SERIAL,
        request_timeout=settings.SCYLLA_REQUEST_TIMEOUT,
    )

    return Cluster(
        contact_points=settings.SCYLLA_CONTACT_POINTS,
        port=settings.SCYLLA_PORT,
        auth_provider=auth_provider,
        protocol_version=4,
        connect_timeout=settings.SCYLLA_CONNECT_TIMEOUT,
        control_connection_timeout=settings.SCYLLA_CONTROL_TIMEOUT,
        reconnection_policy=ExponentialReconnectionPolicy(base_delay=1, max_delay=30),
        execution_profiles={EXEC_PROFILE_DEFAULT: default_profile},
    )


async def get_scylla_session() -> Session:
    loop_id = id(asyncio.get_running_loop())

    # Fast path: session already exists for this loop
    if (session := scylla_sessions.get(loop_id)) is not None:
        return session

    Logger.base.info(f'🔌 [ScyllaDB] Creating new session (loop={loop_id})...')

    cluster = create_cluster()
    session = await anyio.to_thread.run_sync(partial(cluster.connect, settings.SCYLLA_KEYSPACE))
    scylla_sessions[loop_id] = session

    Logger.base.info(
        f'✅ [ScyllaDB] Session created (loop={loop_id}, keyspace={settings.SCYLLA_KEYSPACE})'
    )
    return session


async def close_all_scylla_sessions() -> None:
    """Shut down every session. Only call during application shutdown."""
    for loop_id, session in list(scylla_sessions.items()):
        try:
            await anyio.to_thread.run_sync(session.cluster.shutdown)
            Logger.base.info(f'🔌 [ScyllaDB] Session closed (loop={loop_id})')
        except Exception as e:
            Logger.base.error(f'❌ [ScyllaDB] Error closing session (loop={loop_id}): {e}')
    scylla_sessions.clear()


async def warmup_scylla_session() -> bool:
    """Open the session and run one query so the first request does not pay for connect."""
    try:
        Logger.base.info('🔥 [ScyllaDB Warmup] Starting warmup...')

        session = await get_scylla_session()
        query = SimpleStatement(
            'SELECT release_version FROM system.local', consistency_level=ConsistencyLevel.ONE
        )
        await anyio.to_thread.run_sync(session.execute, query)

        Logger.base.info('✅ [ScyllaDB Warmup] Completed: connections ready')
        return True

    except Exception as e:
        Logger.base.error(f'❌ [ScyllaDB Warmup] Failed: {e}')
        return False
