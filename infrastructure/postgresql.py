# ============================================================================
# POSTGRESQL CONNECTION INFRASTRUCTURE
# ============================================================================
# STATUS: Infrastructure - PostgreSQL connection handling
# PURPOSE: Read-only database sessions for schema introspection
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
PostgreSQL Connection Infrastructure

Every metadata query opens a short read-only session, runs, and closes.
The dumper never writes, so sessions are flagged read-only on the server
side as well.

Authentication Priority:
1. Explicit connection string (``--connection``) or DATABASE_URL
2. Managed identity (USE_MANAGED_IDENTITY=true + DB_ADMIN_MANAGED_IDENTITY_NAME),
   needs the optional ``azure-identity`` package
3. Password authentication (POSTGRES_USER / POSTGRES_PASSWORD)

Environment Variables:
    DATABASE_URL                        Full connection string / URL
    POSTGRES_HOST, POSTGRES_PORT        Server (POSTGIS_* accepted as fallback)
    POSTGRES_DB                         Database
    POSTGRES_USER, POSTGRES_PASSWORD    Password authentication
    POSTGRES_SSLMODE                    Default: prefer
    POSTGRES_SCHEMA                     Schema to introspect (default: public)
"""

import logging
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import psycopg
from psycopg.conninfo import conninfo_to_dict, make_conninfo
from psycopg.rows import dict_row

logger = logging.getLogger(__name__)

APPLICATION_NAME = "spatial-schema-dumper"
AZURE_POSTGRES_SCOPE = "https://ossrdbms-aad.database.windows.net/.default"


# ============================================================================
# CONNECTION SETTINGS
# ============================================================================

@dataclass(frozen=True)
class ConnectionSettings:
    """Server coordinates and credentials taken from the environment."""
    host: Optional[str] = None
    port: str = "5432"
    database: Optional[str] = None
    user: str = "postgres"
    password: str = ""
    sslmode: str = "prefer"
    managed_identity_name: Optional[str] = None
    managed_identity_client_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ConnectionSettings":
        use_managed_identity = os.environ.get("USE_MANAGED_IDENTITY", "").lower() == "true"
        return cls(
            host=os.environ.get("POSTGRES_HOST") or os.environ.get("POSTGIS_HOST"),
            port=os.environ.get("POSTGRES_PORT") or os.environ.get("POSTGIS_PORT", "5432"),
            database=os.environ.get("POSTGRES_DB") or os.environ.get("POSTGIS_DATABASE"),
            user=os.environ.get("POSTGRES_USER") or os.environ.get("POSTGIS_USER", "postgres"),
            password=os.environ.get("POSTGRES_PASSWORD") or os.environ.get("POSTGIS_PASSWORD", ""),
            sslmode=os.environ.get("POSTGRES_SSLMODE", "prefer"),
            managed_identity_name=(
                os.environ.get("DB_ADMIN_MANAGED_IDENTITY_NAME") if use_managed_identity else None
            ),
            managed_identity_client_id=os.environ.get("DB_ADMIN_MANAGED_IDENTITY_CLIENT_ID"),
        )


# ============================================================================
# POSTGRESQL REPOSITORY
# ============================================================================

class PostgreSQLRepository:
    """
    Query runner for catalog introspection.

    Usage:
        repo = PostgreSQLRepository(schema_name="public")
        rows = repo.fetch_all("SELECT relname FROM pg_class WHERE relkind = %s", ("r",))
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        schema_name: Optional[str] = None,
        connect_timeout: int = 10,
        settings: Optional[ConnectionSettings] = None,
    ):
        """
        Args:
            connection_string: Explicit libpq string or URL (beats the environment)
            schema_name: Schema to introspect (default: POSTGRES_SCHEMA or public)
            connect_timeout: Seconds to wait for the server
            settings: Connection settings (default: from environment)
        """
        self.schema_name = schema_name or os.environ.get("POSTGRES_SCHEMA", "public")
        self.connect_timeout = connect_timeout
        self.settings = settings or ConnectionSettings.from_env()
        self._conn_string = connection_string or os.environ.get("DATABASE_URL")
        self._conn_string_lock = threading.Lock()

    # ========================================================================
    # CONNECTION STRING
    # ========================================================================

    @property
    def conn_string(self) -> str:
        """Connection string, built on first use (token acquisition is slow)."""
        if self._conn_string is None:
            with self._conn_string_lock:
                if self._conn_string is None:
                    self._conn_string = self._build_connection_string()
        return self._conn_string

    def _explicit_params(self) -> Dict[str, str]:
        if not self._conn_string:
            return {}
        try:
            return conninfo_to_dict(self._conn_string)
        except psycopg.ProgrammingError:
            return {}

    @property
    def host(self) -> str:
        return self._explicit_params().get("host") or self.settings.host or "localhost"

    @property
    def database(self) -> str:
        return self._explicit_params().get("dbname") or self.settings.database or "postgres"

    def _build_connection_string(self) -> str:
        settings = self.settings
        if not settings.host or not settings.database:
            raise ValueError(
                "Database connection not configured. "
                "Pass --connection, set DATABASE_URL, or set POSTGRES_HOST and POSTGRES_DB."
            )

        if settings.managed_identity_name:
            return self._managed_identity_conninfo(settings)

        if not settings.password:
            raise ValueError(
                "No authentication configured. "
                "Set DATABASE_URL, USE_MANAGED_IDENTITY=true or provide POSTGRES_PASSWORD."
            )

        logger.debug(f"Password authentication for {settings.user}@{settings.host}/{settings.database}")
        return make_conninfo(
            host=settings.host,
            port=settings.port,
            dbname=settings.database,
            user=settings.user,
            password=settings.password,
            sslmode=settings.sslmode,
        )

    def _managed_identity_conninfo(self, settings: ConnectionSettings) -> str:
        """Token-authenticated connection string (Azure Database for PostgreSQL)."""
        try:
            from azure.identity import ManagedIdentityCredential
        except ImportError:
            raise ImportError(
                "azure-identity package required for managed identity. "
                "Install with: pip install spatial-schema-dumper[azure]"
            )

        try:
            if settings.managed_identity_client_id:
                credential = ManagedIdentityCredential(client_id=settings.managed_identity_client_id)
            else:
                credential = ManagedIdentityCredential()
            token = credential.get_token(AZURE_POSTGRES_SCOPE).token
        except Exception as e:
            logger.error(f"Managed identity token acquisition failed: {e}")
            raise RuntimeError(f"Failed to acquire managed identity token: {e}") from e

        logger.debug(f"Managed identity token acquired for {settings.managed_identity_name}")
        return make_conninfo(
            host=settings.host,
            port=settings.port,
            dbname=settings.database,
            user=settings.managed_identity_name,
            password=token,
            sslmode="require",
        )

    # ========================================================================
    # SESSIONS
    # ========================================================================

    @contextmanager
    def get_connection(self):
        """
        Read-only connection with dict rows; always closed on exit.
        """
        conn = psycopg.connect(
            self.conn_string,
            row_factory=dict_row,
            connect_timeout=self.connect_timeout,
            application_name=APPLICATION_NAME,
        )
        try:
            conn.read_only = True
            yield conn
        except psycopg.Error as e:
            logger.error(f"PostgreSQL error on {self.host}/{self.database}: {e}")
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def get_cursor(self, conn=None):
        """Cursor on ``conn``, or on a fresh connection."""
        if conn is not None:
            with conn.cursor() as cursor:
                yield cursor
            return
        with self.get_connection() as own_conn:
            with own_conn.cursor() as cursor:
                yield cursor

    def fetch_one(self, query, params: Optional[tuple] = None) -> Optional[Dict[str, Any]]:
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchone()

    def fetch_all(self, query, params: Optional[tuple] = None) -> List[Dict[str, Any]]:
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()


__all__ = [
    "ConnectionSettings",
    "PostgreSQLRepository",
]
