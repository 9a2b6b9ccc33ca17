import json
import sqlite3
from pathlib import Path
from typing import Any

from utils.schema import (
    APPLICATION_COLUMNS,
    APPLICATIONS_JOB_APPLICANT_INDEX,
    JOB_COLUMNS,
    JSON_COLUMNS,
    USER_COLUMNS,
    USERS_EMAIL_INDEX,
)

# Fields joined onto application rows for list views
_JOB_SUMMARY_COLUMNS = ['title', 'company', 'location', 'salary_min', 'salary_max', 'status']
_APPLICANT_SUMMARY_COLUMNS = ['name', 'email', 'phone', 'skills', 'experience']


def _unicode_lower(value):
    # SQLite's built-in lower() only folds ASCII
    return value.lower() if isinstance(value, str) else value


class MarketplaceDatabase:
    """
    SQLite database for users, job postings and applications.

    Every method opens its own connection and closes it before returning, so one
    instance can be shared by concurrent request handlers. Uniqueness of emails and
    of (job, applicant) pairs is enforced by unique indexes; violations surface as
    sqlite3.IntegrityError for the caller to interpret.
    """

    def __init__(self, db_path: str, timeout: float = 10.0):
        """
        Initialize the marketplace database.

        Args:
            db_path: Path to the SQLite database file
            timeout: Seconds a connection waits on a locked database before failing
        """
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._ensure_database_exists()

    def _get_connection(self):
        """Get a database connection with foreign keys enforced and Unicode-aware unicode_lower()."""
        conn = sqlite3.connect(str(self.db_path), timeout=self.timeout, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.create_function('unicode_lower', 1, _unicode_lower, deterministic=True)
        conn.execute('PRAGMA foreign_keys = ON')
        return conn

    def _ensure_database_exists(self):
        """Ensure SQLite database exists with proper schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    password_hash TEXT NOT NULL,
                    role TEXT NOT NULL,
                    company TEXT,
                    location TEXT,
                    phone TEXT,
                    resume TEXT,
                    skills TEXT,
                    experience INTEGER,
                    created_date TEXT NOT NULL
                )
            ''')
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS jobs (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    company TEXT NOT NULL,
                    description TEXT NOT NULL,
                    location TEXT NOT NULL,
                    category TEXT NOT NULL,
                    job_type TEXT NOT NULL,
                    salary_min INTEGER NOT NULL,
                    salary_max INTEGER NOT NULL,
                    experience_required INTEGER NOT NULL,
                    skills TEXT,
                    employer_id TEXT NOT NULL REFERENCES users(id),
                    status TEXT NOT NULL,
                    posted_date TEXT NOT NULL
                )
            ''')
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS applications (
                    id TEXT PRIMARY KEY,
                    job_id TEXT NOT NULL REFERENCES jobs(id),
                    applicant_id TEXT NOT NULL REFERENCES users(id),
                    status TEXT NOT NULL,
                    cover_letter TEXT,
                    resume TEXT,
                    applied_date TEXT NOT NULL,
                    updated_date TEXT NOT NULL
                )
            ''')

            cursor.execute(f'CREATE UNIQUE INDEX IF NOT EXISTS {USERS_EMAIL_INDEX} ON users(email)')
            cursor.execute(
                f'CREATE UNIQUE INDEX IF NOT EXISTS {APPLICATIONS_JOB_APPLICANT_INDEX} '
                'ON applications(job_id, applicant_id)'
            )
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_jobs_listing ON jobs(status, location, category)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_jobs_employer ON jobs(employer_id)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_applications_applicant ON applications(applicant_id)')
            conn.commit()
        finally:
            conn.close()

    # =========================================================================
    # Row conversion
    # =========================================================================

    @staticmethod
    def _encode(column: str, value: Any) -> Any:
        if column in JSON_COLUMNS and value is not None:
            return json.dumps(list(value))
        return value

    @staticmethod
    def _decode_row(row: sqlite3.Row | None) -> dict[str, Any] | None:
        if row is None:
            return None
        result = {}
        for key in row.keys():
            value = row[key]
            column = key.split('__', 1)[-1]
            if column in JSON_COLUMNS:
                value = json.loads(value) if value else []
            result[key] = value
        return result

    # =========================================================================
    # Generic helpers
    # =========================================================================

    def _insert(self, table: str, columns: list[str], row: dict[str, Any]):
        column_sql = ', '.join(columns)
        placeholders = ', '.join(['?' for _ in columns])
        values = [self._encode(col, row.get(col)) for col in columns]

        conn = self._get_connection()
        try:
            conn.execute(f'INSERT INTO {table} ({column_sql}) VALUES ({placeholders})', values)
            conn.commit()
        finally:
            conn.close()

    def _update(self, table: str, columns: list[str], record_id: str, updates: dict[str, Any]) -> int:
        """Update a record by id. Returns number of rows affected."""
        unknown = set(updates) - set(columns)
        if unknown:
            raise ValueError(f"Unknown {table} columns: {sorted(unknown)}")
        if not updates:
            return 0

        set_clause = ', '.join([f'{k} = ?' for k in updates.keys()])
        values = [self._encode(k, v) for k, v in updates.items()]

        conn = self._get_connection()
        try:
            cursor = conn.execute(f'UPDATE {table} SET {set_clause} WHERE id = ?', values + [record_id])
            row_count = cursor.rowcount
            conn.commit()
            return row_count
        finally:
            conn.close()

    def _fetch_one(self, sql: str, params: list[Any]) -> dict[str, Any] | None:
        conn = self._get_connection()
        try:
            return self._decode_row(conn.execute(sql, params).fetchone())
        finally:
            conn.close()

    def _fetch_all(self, sql: str, params: list[Any]) -> list[dict[str, Any]]:
        conn = self._get_connection()
        try:
            return [self._decode_row(row) for row in conn.execute(sql, params).fetchall()]
        finally:
            conn.close()

    def clear(self):
        """Delete every record (applications first to satisfy foreign keys)."""
        conn = self._get_connection()
        try:
            conn.execute('DELETE FROM applications')
            conn.execute('DELETE FROM jobs')
            conn.execute('DELETE FROM users')
            conn.commit()
        finally:
            conn.close()

    # =========================================================================
    # Users
    # =========================================================================

    def add_user(self, row: dict[str, Any]):
        self._insert('users', USER_COLUMNS, row)

    def get_user(self, user_id: str) -> dict[str, Any] | None:
        return self._fetch_one('SELECT * FROM users WHERE id = ?', [user_id])

    def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        return self._fetch_one('SELECT * FROM users WHERE email = ?', [email])

    def update_user(self, user_id: str, updates: dict[str, Any]) -> int:
        return self._update('users', USER_COLUMNS, user_id, updates)

    # =========================================================================
    # Jobs
    # =========================================================================

    def add_job(self, row: dict[str, Any]):
        self._insert('jobs', JOB_COLUMNS, row)

    def get_job(self, job_id: str) -> dict[str, Any] | None:
        return self._fetch_one('SELECT * FROM jobs WHERE id = ?', [job_id])

    def update_job(self, job_id: str, updates: dict[str, Any]) -> int:
        return self._update('jobs', JOB_COLUMNS, job_id, updates)

    def delete_job(self, job_id: str) -> int:
        conn = self._get_connection()
        try:
            cursor = conn.execute('DELETE FROM jobs WHERE id = ?', [job_id])
            row_count = cursor.rowcount
            conn.commit()
            return row_count
        finally:
            conn.close()

    @staticmethod
    def _job_filter_sql(filters: dict[str, Any]) -> tuple[str, list[Any]]:
        """
        Build a WHERE clause for job queries.

        Recognized keys: status, location, category, min_salary (salary_max >= value),
        max_salary (salary_min <= value), max_experience (experience_required <= value),
        search_tokens (any token contained in title, company or description).
        """
        clauses = []
        params: list[Any] = []

        for key, column in (('status', 'status'), ('location', 'location'), ('category', 'category')):
            if filters.get(key) is not None:
                clauses.append(f'{column} = ?')
                params.append(filters[key])

        if filters.get('min_salary') is not None:
            clauses.append('salary_max >= ?')
            params.append(filters['min_salary'])
        if filters.get('max_salary') is not None:
            clauses.append('salary_min <= ?')
            params.append(filters['max_salary'])
        if filters.get('max_experience') is not None:
            clauses.append('experience_required <= ?')
            params.append(filters['max_experience'])

        tokens = filters.get('search_tokens') or []
        if tokens:
            token_clauses = []
            for token in tokens:
                escaped = token.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
                pattern = f'%{escaped}%'
                token_clauses.append(
                    "(unicode_lower(title) LIKE ? ESCAPE '\\' OR unicode_lower(company) LIKE ? ESCAPE '\\' "
                    "OR unicode_lower(description) LIKE ? ESCAPE '\\')"
                )
                params.extend([pattern, pattern, pattern])
            clauses.append('(' + ' OR '.join(token_clauses) + ')')

        where = ' AND '.join(clauses) if clauses else '1 = 1'
        return where, params

    def search_jobs(self, filters: dict[str, Any], limit: int, offset: int) -> list[dict[str, Any]]:
        """One page of jobs matching filters, newest posted first."""
        where, params = self._job_filter_sql(filters)
        return self._fetch_all(
            f'SELECT * FROM jobs WHERE {where} ORDER BY posted_date DESC, rowid DESC LIMIT ? OFFSET ?',
            params + [limit, offset],
        )

    def count_jobs(self, filters: dict[str, Any]) -> int:
        where, params = self._job_filter_sql(filters)
        conn = self._get_connection()
        try:
            return conn.execute(f'SELECT COUNT(*) FROM jobs WHERE {where}', params).fetchone()[0]
        finally:
            conn.close()

    def get_jobs_by_employer(self, employer_id: str) -> list[dict[str, Any]]:
        return self._fetch_all(
            'SELECT * FROM jobs WHERE employer_id = ? ORDER BY posted_date DESC, rowid DESC',
            [employer_id],
        )

    # =========================================================================
    # Applications
    # =========================================================================

    def add_application(self, row: dict[str, Any]):
        self._insert('applications', APPLICATION_COLUMNS, row)

    def get_application(self, application_id: str) -> dict[str, Any] | None:
        return self._fetch_one('SELECT * FROM applications WHERE id = ?', [application_id])

    def find_application(self, job_id: str, applicant_id: str) -> dict[str, Any] | None:
        return self._fetch_one(
            'SELECT * FROM applications WHERE job_id = ? AND applicant_id = ?', [job_id, applicant_id]
        )

    def update_application(self, application_id: str, updates: dict[str, Any]) -> int:
        return self._update('applications', APPLICATION_COLUMNS, application_id, updates)

    def get_applications_by_applicant(self, applicant_id: str) -> list[dict[str, Any]]:
        """
        Applications of one job seeker, newest first.
        Job summary fields are returned with a 'job__' prefix.
        """
        job_columns = ', '.join([f'j.{col} AS job__{col}' for col in _JOB_SUMMARY_COLUMNS])
        return self._fetch_all(
            f'SELECT a.*, {job_columns} FROM applications a '
            'JOIN jobs j ON j.id = a.job_id '
            'WHERE a.applicant_id = ? ORDER BY a.applied_date DESC, a.rowid DESC',
            [applicant_id],
        )

    def get_applications_by_job(self, job_id: str) -> list[dict[str, Any]]:
        """
        Applications to one job, newest first.
        Applicant summary fields are returned with an 'applicant__' prefix.
        """
        applicant_columns = ', '.join([f'u.{col} AS applicant__{col}' for col in _APPLICANT_SUMMARY_COLUMNS])
        return self._fetch_all(
            f'SELECT a.*, {applicant_columns} FROM applications a '
            'JOIN users u ON u.id = a.applicant_id '
            'WHERE a.job_id = ? ORDER BY a.applied_date DESC, a.rowid DESC',
            [job_id],
        )

    def count_applications_for_job(self, job_id: str) -> int:
        conn = self._get_connection()
        try:
            return conn.execute('SELECT COUNT(*) FROM applications WHERE job_id = ?', [job_id]).fetchone()[0]
        finally:
            conn.close()
