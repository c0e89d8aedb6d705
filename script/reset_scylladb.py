#!/usr/bin/env python3
"""
ScyllaDB Reset Script

1. Drop & recreate the keyspace named by SCYLLA_KEYSPACE
2. Run scylla_schemas.cql inside it

Only resets the structure. To load sample sessions run `python -m script.seed_data`.
"""

import time

from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster

from session_booking.platform.config.core_setting import settings
from session_booking.platform.constant.path import SCYLLA_SCHEMA_FILE


def load_schema_statements() -> list[str]:
    """Split the schema file into statements, dropping comment-only lines"""
    if not SCYLLA_SCHEMA_FILE.exists():
        raise FileNotFoundError(f'Schema file not found: {SCYLLA_SCHEMA_FILE}')

    statements = []
    for raw in SCYLLA_SCHEMA_FILE.read_text().split(';'):
        lines = [line for line in raw.split('\n') if not line.strip().startswith('--')]
        if cleaned := '\n'.join(lines).strip():
            statements.append(cleaned)
    return statements


def reset_scylladb_keyspace() -> None:
    keyspace = settings.SCYLLA_KEYSPACE
    print(f'📊 Connecting to ScyllaDB: {settings.SCYLLA_CONTACT_POINTS}')

    cluster = Cluster(
        contact_points=settings.SCYLLA_CONTACT_POINTS,
        port=settings.SCYLLA_PORT,
        auth_provider=PlainTextAuthProvider(
            username=settings.SCYLLA_USERNAME,
            password=settings.SCYLLA_PASSWORD.get_secret_value(),
        ),
    )
    try:
        session = cluster.connect()

        print(f'🗑️  Dropping keyspace {keyspace}...')
        session.execute(f'DROP KEYSPACE IF EXISTS {keyspace}')

        print(f'🏗️  Creating keyspace {keyspace}...')
        session.execute(
            f"""
            CREATE KEYSPACE {keyspace}
            WITH replication = {{'class': 'NetworkTopologyStrategy', 'replication_factor': 1}}
            """
        )
        time.sleep(3)  # Let the schema change settle across the cluster
        session.set_keyspace(keyspace)

        statements = load_schema_statements()
        print(f'   📋 Found {len(statements)} CQL statements in {SCYLLA_SCHEMA_FILE.name}')
        for i, statement in enumerate(statements, 1):
            session.execute(statement)
            print(f'   ✅ Statement {i}/{len(statements)} executed')

        print('✅ ScyllaDB keyspace reset completed!')
    finally:
        cluster.shutdown()


def main() -> None:
    print('🔄 Starting ScyllaDB reset...')
    print('=' * 50)

    try:
        reset_scylladb_keyspace()
    except Exception as e:
        print(f'❌ Reset failed: {e}')
        raise SystemExit(1)

    print('=' * 50)
    print('💡 To seed sample sessions, run: python -m script.seed_data')


if __name__ == '__main__':
    main()
