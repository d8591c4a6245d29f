import sqlite3
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, List
from contextlib import contextmanager

from .config import DEFAULT_DB_PATH
from .errors import UpstreamUnavailable
from .logging_config import get_logger
from .match_record import GeoBounds, OfficialCandidate

logger = get_logger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS profiles (
    user_id      TEXT PRIMARY KEY,
    full_name    TEXT NOT NULL,
    role         TEXT NOT NULL DEFAULT 'citizen',
    is_verified  INTEGER NOT NULL DEFAULT 0,
    phone        TEXT,
    email        TEXT,
    city         TEXT,
    state        TEXT,
    district     TEXT,
    pincode      TEXT,
    ward         TEXT,
    area         TEXT,
    geo_north    REAL,
    geo_south    REAL,
    geo_east     REAL,
    geo_west     REAL
);

CREATE TABLE IF NOT EXISTS issues (
    issue_id             TEXT PRIMARY KEY,
    title                TEXT NOT NULL,
    issue_type           TEXT,
    city                 TEXT,
    state                TEXT,
    ward                 TEXT,
    area                 TEXT,
    pincode              TEXT,
    status               TEXT NOT NULL DEFAULT 'pending',
    assigned_official_id TEXT,
    updated_at           TEXT,
    FOREIGN KEY (assigned_official_id) REFERENCES profiles(user_id)
);

CREATE TABLE IF NOT EXISTS notifications (
    notification_id   INTEGER PRIMARY KEY,
    user_id           TEXT NOT NULL,
    title             TEXT NOT NULL,
    message           TEXT NOT NULL,
    notification_type TEXT NOT NULL,
    issue_id          TEXT,
    created_at        TEXT,
    FOREIGN KEY (user_id) REFERENCES profiles(user_id)
);

CREATE INDEX IF NOT EXISTS idx_profiles_role_verified
    ON profiles(role, is_verified);
"""

OFFICIAL_COLUMNS = """
    user_id, full_name, phone, email,
    city, state, district, pincode, ward, area,
    geo_north, geo_south, geo_east, geo_west
"""

def current_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")

@contextmanager
def get_db_connection(db_path: Path = DEFAULT_DB_PATH):
    logger.debug(f"Opening database connection: {db_path}")
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
        logger.debug("Database connection closed")

def create_schema(db_path: Path = DEFAULT_DB_PATH) -> None:
    with get_db_connection(db_path) as conn:
        conn.executescript(SCHEMA_SQL)
        conn.commit()

def _row_to_candidate(r: sqlite3.Row) -> OfficialCandidate:
    bounds = GeoBounds(
        north=r['geo_north'],
        south=r['geo_south'],
        east=r['geo_east'],
        west=r['geo_west'],
    )

    return OfficialCandidate(
        official_id=r['user_id'],
        full_name=r['full_name'],
        city=r['city'],
        state=r['state'],
        district=r['district'],
        pincode=r['pincode'],
        ward=r['ward'],
        area=r['area'],
        #partial bounds are kept, the matcher ignores them
        geo_bounds=bounds if bounds != GeoBounds() else None,
        phone=r['phone'],
        email=r['email'],
    )

def fetch_verified_officials(db_path: Path = DEFAULT_DB_PATH,
                             city: Optional[str] = None,
                             state: Optional[str] = None) -> List[OfficialCandidate]:
    """
    Read every verified official, optionally restricted to one city and state.

    Rows come back in insertion order so ranking ties resolve the same way
    on every request. Any sqlite failure is reported as UpstreamUnavailable.
    """
    sql = f"SELECT {OFFICIAL_COLUMNS} FROM profiles WHERE role = 'official' AND is_verified = 1"
    params: list = []

    if city is not None:
        sql += " AND city = ?"
        params.append(city)
    if state is not None:
        sql += " AND state = ?"
        params.append(state)

    sql += " ORDER BY rowid"

    logger.info(f"Fetching verified officials from database: {db_path}")
    try:
        with get_db_connection(db_path) as conn:
            result = [_row_to_candidate(r) for r in conn.execute(sql, params)]
    except sqlite3.Error as e:
        logger.error(f"Database error while fetching officials: {e}")
        raise UpstreamUnavailable(f"Failed to fetch officials: {e}") from e

    logger.info(f"Fetched {len(result)} verified officials")
    return result

def fetch_official(db_path: Path, user_id: str) -> Optional[OfficialCandidate]:
    try:
        with get_db_connection(db_path) as conn:
            r = conn.execute(
                f"SELECT {OFFICIAL_COLUMNS} FROM profiles WHERE user_id = ?",
                (user_id,)
            ).fetchone()
    except sqlite3.Error as e:
        logger.error(f"Database error while fetching official {user_id}: {e}")
        raise UpstreamUnavailable(f"Failed to fetch official: {e}") from e

    return _row_to_candidate(r) if r is not None else None

def get_official_count(db_path: Path = DEFAULT_DB_PATH) -> int:
    try:
        with get_db_connection(db_path) as conn:
            cursor = conn.execute(
                "SELECT COUNT(*) FROM profiles WHERE role = 'official' AND is_verified = 1"
            )
            return cursor.fetchone()[0]
    except sqlite3.Error as e:
        logger.error(f"Database error while counting officials: {e}")
        return 0

def check_database_exists(db_path: Path = DEFAULT_DB_PATH) -> bool:
    exists = db_path.exists()
    if exists:
        logger.debug(f"Database exists: {db_path}")
    else:
        logger.warning(f"Database NOT found: {db_path}")
    return exists

def fetch_issue(db_path: Path, issue_id: str) -> Optional[dict]:
    try:
        with get_db_connection(db_path) as conn:
            r = conn.execute("SELECT * FROM issues WHERE issue_id = ?", (issue_id,)).fetchone()
    except sqlite3.Error as e:
        logger.error(f"Database error while fetching issue {issue_id}: {e}")
        raise UpstreamUnavailable(f"Failed to fetch issue: {e}") from e

    return dict(r) if r is not None else None

def assign_official(db_path: Path, issue_id: str, official_id: Optional[str]) -> bool:
    """Record the matched official on an issue. Returns False for an unknown issue."""
    try:
        with get_db_connection(db_path) as conn:
            with conn:
                cur = conn.execute(
                    """
                    UPDATE issues
                    SET assigned_official_id = ?,
                        status = CASE
                            WHEN status = 'pending' AND ? IS NOT NULL THEN 'assigned'
                            ELSE status
                        END,
                        updated_at = ?
                    WHERE issue_id = ?
                    """,
                    (official_id, official_id, current_timestamp(), issue_id)
                )
                updated = cur.rowcount > 0
    except sqlite3.Error as e:
        logger.error(f"Database error while assigning issue {issue_id}: {e}")
        raise UpstreamUnavailable(f"Failed to assign issue: {e}") from e

    if updated:
        logger.info(f"Issue {issue_id} assigned to {official_id or 'nobody'}")
    return updated

def insert_notification(db_path: Path,
                        user_id: str,
                        title: str,
                        message: str,
                        notification_type: str,
                        issue_id: Optional[str] = None) -> int:
    with get_db_connection(db_path) as conn:
        with conn:
            cur = conn.execute(
                """
                INSERT INTO notifications (
                    user_id, title, message, notification_type, issue_id, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, title, message, notification_type, issue_id, current_timestamp())
            )
            return cur.lastrowid
