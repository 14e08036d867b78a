"""SQLAlchemy-backed node store over a flat ``dre_accounts`` table."""

import json
from collections.abc import Iterable
from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Connection

from dre_config.application.ports.database import DatabaseEnginePort
from dre_config.application.ports.node_store import NodeStorePort
from dre_config.domain.models.accounts import AccountNode
from dre_config.infrastructure.logging.logger import get_app_logger


_COLUMNS = (
    "id",
    "company_id",
    "code",
    "name",
    "kind",
    "parent_id",
    "display_order",
    "is_active",
    "is_expanded",
    "company_visibility",
    "is_new",
    "is_editing",
    "committed_name",
    "has_payload",
    "category_ids",
    "revenue_or_expense",
    "indicator_id",
    "selected_account_ids",
    "sign",
)

_JSON_COLUMNS = ("company_visibility", "category_ids", "selected_account_ids")

_SELECT_COLUMNS = ", ".join(_COLUMNS)

CREATE_DRE_ACCOUNTS_SQL = """
CREATE TABLE IF NOT EXISTS dre_accounts (
    id TEXT PRIMARY KEY,
    company_id TEXT NOT NULL,
    code TEXT,
    name TEXT,
    kind TEXT NOT NULL,
    parent_id TEXT,
    display_order INTEGER NOT NULL,
    is_active BOOLEAN NOT NULL,
    is_expanded BOOLEAN NOT NULL,
    company_visibility TEXT,
    is_new BOOLEAN NOT NULL,
    is_editing BOOLEAN NOT NULL,
    committed_name TEXT,
    has_payload BOOLEAN NOT NULL,
    category_ids TEXT,
    revenue_or_expense TEXT,
    indicator_id TEXT,
    selected_account_ids TEXT,
    sign TEXT
)
"""

CREATE_DRE_ACCOUNTS_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS ix_dre_accounts_company_parent
ON dre_accounts (company_id, parent_id)
"""

SELECT_ACCOUNT_SQL = text(
    f"SELECT {_SELECT_COLUMNS} FROM dre_accounts WHERE id = :id"
)

SELECT_CHILDREN_SQL = text(
    f"""
    SELECT {_SELECT_COLUMNS}
    FROM dre_accounts
    WHERE company_id = :company_id AND parent_id = :parent_id
    ORDER BY display_order, id
    """
)

SELECT_ROOTS_SQL = text(
    f"""
    SELECT {_SELECT_COLUMNS}
    FROM dre_accounts
    WHERE company_id = :company_id AND parent_id IS NULL
    ORDER BY display_order, id
    """
)

SELECT_COMPANY_SQL = text(
    f"""
    SELECT {_SELECT_COLUMNS}
    FROM dre_accounts
    WHERE company_id = :company_id
    ORDER BY display_order, id
    """
)

INSERT_ACCOUNT_SQL = text(
    f"""
    INSERT INTO dre_accounts ({_SELECT_COLUMNS})
    VALUES ({", ".join(f":{column}" for column in _COLUMNS)})
    """
)

UPDATE_ACCOUNT_SQL = text(
    f"""
    UPDATE dre_accounts
    SET {", ".join(f"{column} = :{column}" for column in _COLUMNS[1:])}
    WHERE id = :id
    """
)

DELETE_ACCOUNT_SQL = text("DELETE FROM dre_accounts WHERE id = :id")

DELETE_ACCOUNTS_SQL = text(
    "DELETE FROM dre_accounts WHERE id IN :ids"
).bindparams(bindparam("ids", expanding=True))

DELETE_COMPANY_SQL = text(
    "DELETE FROM dre_accounts WHERE company_id = :company_id"
)


def _to_params(node: AccountNode) -> dict[str, Any]:
    """Convert a node into bind parameters for the flat table."""
    record = node.to_record()
    for column in _JSON_COLUMNS:
        record[column] = json.dumps(record[column])
    return record


def _from_row(row) -> AccountNode:
    """Convert a result row into a node."""
    record = dict(row._mapping)
    for column in _JSON_COLUMNS:
        raw = record.get(column)
        record[column] = json.loads(raw) if raw else []
    return AccountNode.from_record(record)


class SqlAlchemyNodeStore(NodeStorePort):
    """Node store backed by SQLAlchemy.

    Every write runs inside ``engine.begin()`` so a batch either commits as a
    whole or is rolled back by the database.
    """

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the configuration engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def prepare(self) -> None:
        """Ensure the accounts table and its sibling index exist."""
        engine = self._db_port.get_dre_engine()
        with engine.begin() as conn:
            conn.exec_driver_sql(CREATE_DRE_ACCOUNTS_SQL)
            conn.exec_driver_sql(CREATE_DRE_ACCOUNTS_INDEX_SQL)

    def get(self, node_id: str) -> AccountNode | None:
        engine = self._db_port.get_dre_engine()
        with engine.connect() as conn:
            row = conn.execute(SELECT_ACCOUNT_SQL, {"id": node_id}).first()
        return _from_row(row) if row is not None else None

    def children(
        self,
        company_id: str,
        parent_id: str | None,
    ) -> list[AccountNode]:
        if parent_id is None:
            return self.roots(company_id)
        return self._fetch(
            SELECT_CHILDREN_SQL,
            {"company_id": company_id, "parent_id": parent_id},
        )

    def roots(self, company_id: str) -> list[AccountNode]:
        return self._fetch(SELECT_ROOTS_SQL, {"company_id": company_id})

    def list_company(self, company_id: str) -> list[AccountNode]:
        return self._fetch(SELECT_COMPANY_SQL, {"company_id": company_id})

    def upsert(self, node: AccountNode) -> None:
        engine = self._db_port.get_dre_engine()
        with engine.begin() as conn:
            self._upsert(conn, node)

    def remove(self, node_id: str) -> None:
        engine = self._db_port.get_dre_engine()
        with engine.begin() as conn:
            conn.execute(DELETE_ACCOUNT_SQL, {"id": node_id})

    def remove_many(self, node_ids: Iterable[str]) -> int:
        ids = list(node_ids)
        if not ids:
            return 0
        engine = self._db_port.get_dre_engine()
        with engine.begin() as conn:
            result = conn.execute(DELETE_ACCOUNTS_SQL, {"ids": ids})
        return result.rowcount

    def remove_and_upsert(
        self,
        node_ids: Iterable[str],
        nodes: list[AccountNode],
    ) -> int:
        """Delete rows and upsert others inside a single transaction."""
        ids = list(node_ids)
        removed = 0
        engine = self._db_port.get_dre_engine()
        with engine.begin() as conn:
            if ids:
                result = conn.execute(DELETE_ACCOUNTS_SQL, {"ids": ids})
                removed = result.rowcount
            for node in nodes:
                self._upsert(conn, node)
        return removed

    def insert_batch(self, nodes: list[AccountNode]) -> int:
        if not nodes:
            return 0
        engine = self._db_port.get_dre_engine()
        with engine.begin() as conn:
            conn.execute(INSERT_ACCOUNT_SQL, [_to_params(n) for n in nodes])
        self._logger.info(f"Inserted {len(nodes)} accounts into dre_accounts")
        return len(nodes)

    def replace_company(
        self,
        company_id: str,
        nodes: list[AccountNode],
    ) -> int:
        for node in nodes:
            if node.company_id != company_id:
                raise ValueError(
                    f"Node {node.id} belongs to company {node.company_id}, "
                    f"not {company_id}"
                )
        engine = self._db_port.get_dre_engine()
        with engine.begin() as conn:
            conn.execute(DELETE_COMPANY_SQL, {"company_id": company_id})
            if nodes:
                conn.execute(
                    INSERT_ACCOUNT_SQL,
                    [_to_params(node) for node in nodes],
                )
        self._logger.info(
            f"Replaced accounts of company {company_id} with {len(nodes)} rows"
        )
        return len(nodes)

    def upsert_many(self, nodes: list[AccountNode]) -> None:
        """Upsert several nodes in one transaction."""
        engine = self._db_port.get_dre_engine()
        with engine.begin() as conn:
            for node in nodes:
                self._upsert(conn, node)

    def _fetch(self, query, params: dict[str, Any]) -> list[AccountNode]:
        engine = self._db_port.get_dre_engine()
        with engine.connect() as conn:
            rows = conn.execute(query, params).all()
        return [_from_row(row) for row in rows]

    @staticmethod
    def _upsert(conn: Connection, node: AccountNode) -> None:
        params = _to_params(node)
        result = conn.execute(UPDATE_ACCOUNT_SQL, params)
        if result.rowcount == 0:
            conn.execute(INSERT_ACCOUNT_SQL, params)


__all__ = [
    "SqlAlchemyNodeStore",
    "CREATE_DRE_ACCOUNTS_SQL",
    "CREATE_DRE_ACCOUNTS_INDEX_SQL",
]
