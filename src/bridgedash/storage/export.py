"""Export normalized transfers to Parquet or CSV through an in-memory DuckDB table."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import duckdb

from bridgedash.models import CanonicalTransaction

TRANSFERS_SQL = """
CREATE TABLE transfers (
    id                  VARCHAR NOT NULL,
    timestamp           BIGINT NOT NULL,
    source_chain        VARCHAR NOT NULL,
    destination_chain   VARCHAR NOT NULL,
    asset               VARCHAR NOT NULL,
    amount              VARCHAR NOT NULL,
    usd_value           DOUBLE NOT NULL,
    status              VARCHAR,
    tx_hash             VARCHAR,
    bridge_protocol     VARCHAR
)
"""

FORMATS = {"parquet": "PARQUET", "csv": "CSV, HEADER"}


def export_transactions(
    transactions: Sequence[CanonicalTransaction],
    output_path: str | Path,
    fmt: str = "parquet",
) -> int:
    """Write transactions to output_path. Returns row count."""
    key = fmt.lower()
    if key not in FORMATS:
        raise ValueError(f"Unsupported export format {fmt!r} (expected parquet or csv)")
    path = Path(output_path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path_str = str(path).replace("'", "''")
    conn = duckdb.connect(":memory:")
    try:
        conn.execute(TRANSFERS_SQL)
        if transactions:
            conn.executemany(
                "INSERT INTO transfers VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    [
                        tx.id,
                        tx.timestamp,
                        tx.source_chain,
                        tx.destination_chain,
                        tx.asset,
                        tx.amount,
                        tx.usd_value,
                        tx.status,
                        tx.tx_hash,
                        tx.bridge_protocol,
                    ]
                    for tx in transactions
                ],
            )
        conn.execute(f"COPY (SELECT * FROM transfers ORDER BY timestamp DESC) TO '{path_str}' (FORMAT {FORMATS[key]})")
        return conn.execute("SELECT COUNT(*) FROM transfers").fetchone()[0]
    finally:
        conn.close()
