from pathlib import Path


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Log directory
LOG_DIR = BASE_DIR / 'logs'

# CQL schema applied by script/reset_scylladb.py
SCYLLA_SCHEMA_FILE = Path(__file__).resolve().parent.parent / 'database' / 'scylla_schemas.cql'
