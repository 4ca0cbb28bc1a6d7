import sqlite3

from flask import g

from diary.repository.columns import (
    ANSWER_UPDATE_COLUMNS,
    SETTINGS_UPDATE_COLUMNS,
    TODO_CREATE_COLUMNS,
    TODO_UPDATE_COLUMNS,
)


def _casefold(value):
    return value.casefold() if value is not None else None


class SQLiteJournalRepository:
    def __init__(self, db_path):
        self.db_path = db_path

    def _get_db(self):
        if "db" not in g:
            g.db = sqlite3.connect(self.db_path)
            g.db.row_factory = sqlite3.Row
            # SQLite's lower() only folds ASCII
            g.db.create_function("casefold", 1, _casefold, deterministic=True)
        return g.db

    def close_db(self, exception=None):
        db = g.pop("db", None)
        if db is not None:
            db.close()

    def init_db(self):
        db = self._get_db()
        db.executescript(
            """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL,
                name TEXT,
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS answers (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                type TEXT NOT NULL,
                question_1 TEXT,
                question_2 TEXT,
                question_3 TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS practices (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                type TEXT NOT NULL,
                duration_seconds INTEGER NOT NULL,
                completed_at TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS user_settings (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL UNIQUE,
                morning_notification_time TEXT,
                evening_notification_time TEXT,
                theme TEXT NOT NULL DEFAULT 'light',
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS todos (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                title TEXT NOT NULL,
                description TEXT,
                is_completed INTEGER NOT NULL DEFAULT 0,
                priority TEXT NOT NULL DEFAULT 'medium',
                due_date TEXT,
                notes TEXT,
                list_name TEXT NOT NULL DEFAULT 'My Tasks',
                reminder_date TEXT,
                estimated_pomodoros INTEGER NOT NULL DEFAULT 1,
                completed_pomodoros INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS pomodoro_sessions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                type TEXT NOT NULL DEFAULT 'work',
                duration_minutes INTEGER NOT NULL DEFAULT 25,
                task_id INTEGER,
                completed_at TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_answers_user ON answers (user_id, created_at);
            CREATE INDEX IF NOT EXISTS idx_practices_user ON practices (user_id, completed_at);
            CREATE INDEX IF NOT EXISTS idx_todos_user ON todos (user_id);
            CREATE INDEX IF NOT EXISTS idx_sessions_user ON pomodoro_sessions (user_id, completed_at);
            """
        )
        db.commit()

    def ensure_user(self, user_id, email, name, created_at):
        db = self._get_db()
        db.execute(
            """
            INSERT INTO users (id, email, name, created_at) VALUES (?, ?, ?, ?)
            ON CONFLICT (id) DO UPDATE SET email = excluded.email, name = excluded.name
            """,
            (user_id, email, name, created_at),
        )
        db.commit()
        return user_id

    def _fetch_owned(self, table, user_id, row_id):
        db = self._get_db()
        return db.execute(
            f"SELECT * FROM {table} WHERE id = ? AND user_id = ?",
            (row_id, user_id),
        ).fetchone()

    def _update_owned(self, table, columns, user_id, row_id, changes, updated_at):
        assignments = []
        params = []
        for column in columns:
            if column in changes:
                assignments.append(f"{column} = ?")
                params.append(changes[column])
        assignments.append("updated_at = ?")
        params.append(updated_at)
        db = self._get_db()
        cursor = db.execute(
            f"UPDATE {table} SET {', '.join(assignments)} WHERE id = ? AND user_id = ?",
            (*params, row_id, user_id),
        )
        db.commit()
        if cursor.rowcount == 0:
            return None
        return self._fetch_owned(table, user_id, row_id)

    def _delete_owned(self, table, user_id, row_id):
        db = self._get_db()
        cursor = db.execute(
            f"DELETE FROM {table} WHERE id = ? AND user_id = ?",
            (row_id, user_id),
        )
        db.commit()
        return cursor.rowcount > 0

    def fetch_answers(self, user_id, answer_type=None, search=None, limit=None, offset=0):
        query = "SELECT * FROM answers WHERE user_id = ?"
        params = [user_id]
        if answer_type:
            query += " AND type = ?"
            params.append(answer_type)
        if search:
            query += """
                AND (instr(casefold(question_1), ?) > 0
                     OR instr(casefold(question_2), ?) > 0
                     OR instr(casefold(question_3), ?) > 0)
            """
            needle = search.casefold()
            params.extend([needle, needle, needle])
        query += " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit if limit is not None else -1, offset or 0])
        return self._get_db().execute(query, params).fetchall()

    def create_answer(self, user_id, answer_type, question_1, question_2, question_3, created_at):
        db = self._get_db()
        cursor = db.execute(
            """
            INSERT INTO answers (user_id, type, question_1, question_2, question_3, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (user_id, answer_type, question_1, question_2, question_3, created_at, created_at),
        )
        db.commit()
        return self._fetch_owned("answers", user_id, cursor.lastrowid)

    def update_answer(self, user_id, answer_id, changes, updated_at):
        return self._update_owned(
            "answers", ANSWER_UPDATE_COLUMNS, user_id, answer_id, changes, updated_at
        )

    def delete_answer(self, user_id, answer_id):
        return self._delete_owned("answers", user_id, answer_id)

    def fetch_practices(self, user_id, limit=None):
        return self._get_db().execute(
            """
            SELECT * FROM practices
            WHERE user_id = ?
            ORDER BY completed_at DESC, id DESC
            LIMIT ?
            """,
            (user_id, limit if limit is not None else -1),
        ).fetchall()

    def create_practice(self, user_id, practice_type, duration_seconds, completed_at):
        db = self._get_db()
        cursor = db.execute(
            """
            INSERT INTO practices (user_id, type, duration_seconds, completed_at, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (user_id, practice_type, duration_seconds, completed_at, completed_at, completed_at),
        )
        db.commit()
        return self._fetch_owned("practices", user_id, cursor.lastrowid)

    def delete_practice(self, user_id, practice_id):
        return self._delete_owned("practices", user_id, practice_id)

    def fetch_settings(self, user_id):
        return self._get_db().execute(
            "SELECT * FROM user_settings WHERE user_id = ?",
            (user_id,),
        ).fetchone()

    def create_default_settings(self, user_id, created_at):
        db = self._get_db()
        db.execute(
            """
            INSERT OR IGNORE INTO user_settings (user_id, theme, created_at, updated_at)
            VALUES (?, 'light', ?, ?)
            """,
            (user_id, created_at, created_at),
        )
        db.commit()
        return self.fetch_settings(user_id)

    def update_settings(self, user_id, changes, updated_at):
        assignments = []
        params = []
        for column in SETTINGS_UPDATE_COLUMNS:
            if column in changes:
                assignments.append(f"{column} = ?")
                params.append(changes[column])
        assignments.append("updated_at = ?")
        params.append(updated_at)
        db = self._get_db()
        db.execute(
            f"UPDATE user_settings SET {', '.join(assignments)} WHERE user_id = ?",
            (*params, user_id),
        )
        db.commit()
        return self.fetch_settings(user_id)

    def fetch_todos(self, user_id, completed=None, priority=None, limit=None):
        query = "SELECT * FROM todos WHERE user_id = ?"
        params = [user_id]
        if completed is not None:
            query += " AND is_completed = ?"
            params.append(1 if completed else 0)
        if priority:
            query += " AND priority = ?"
            params.append(priority)
        query += """
            ORDER BY is_completed ASC,
                     CASE priority WHEN 'high' THEN 0 WHEN 'medium' THEN 1 ELSE 2 END,
                     created_at DESC,
                     id DESC
            LIMIT ?
        """
        params.append(limit if limit is not None else -1)
        return self._get_db().execute(query, params).fetchall()

    def fetch_todo(self, user_id, todo_id):
        return self._fetch_owned("todos", user_id, todo_id)

    def create_todo(self, user_id, fields, created_at):
        columns = [column for column in TODO_CREATE_COLUMNS if column in fields]
        placeholders = ", ".join(["?"] * (len(columns) + 3))
        db = self._get_db()
        cursor = db.execute(
            f"""
            INSERT INTO todos (user_id, {', '.join(columns)}, created_at, updated_at)
            VALUES ({placeholders})
            """,
            (user_id, *[fields[column] for column in columns], created_at, created_at),
        )
        db.commit()
        return self._fetch_owned("todos", user_id, cursor.lastrowid)

    def update_todo(self, user_id, todo_id, changes, updated_at):
        return self._update_owned(
            "todos", TODO_UPDATE_COLUMNS, user_id, todo_id, changes, updated_at
        )

    def delete_todo(self, user_id, todo_id):
        return self._delete_owned("todos", user_id, todo_id)

    def increment_todo_pomodoros(self, user_id, todo_id, updated_at):
        db = self._get_db()
        cursor = db.execute(
            """
            UPDATE todos
            SET completed_pomodoros = completed_pomodoros + 1, updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (updated_at, todo_id, user_id),
        )
        db.commit()
        return cursor.rowcount > 0

    def fetch_pomodoro_sessions(self, user_id, limit=None):
        return self._get_db().execute(
            """
            SELECT * FROM pomodoro_sessions
            WHERE user_id = ?
            ORDER BY completed_at DESC, id DESC
            LIMIT ?
            """,
            (user_id, limit if limit is not None else -1),
        ).fetchall()

    def create_pomodoro_session(self, user_id, session_type, duration_minutes, task_id, completed_at):
        db = self._get_db()
        cursor = db.execute(
            """
            INSERT INTO pomodoro_sessions
                (user_id, type, duration_minutes, task_id, completed_at, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (user_id, session_type, duration_minutes, task_id, completed_at, completed_at, completed_at),
        )
        db.commit()
        return self._fetch_owned("pomodoro_sessions", user_id, cursor.lastrowid)

    def count_pomodoro_sessions(self, user_id, session_type=None, since=None):
        query = "SELECT COUNT(*) AS total FROM pomodoro_sessions WHERE user_id = ?"
        params = [user_id]
        if session_type:
            query += " AND type = ?"
            params.append(session_type)
        if since:
            query += " AND completed_at >= ?"
            params.append(since)
        row = self._get_db().execute(query, params).fetchone()
        return int(row["total"] or 0)
