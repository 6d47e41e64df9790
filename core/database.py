"""Database layer with SQLite backend for bot persistence"""

import sqlite3
import logging
from contextlib import contextmanager
from typing import Dict, List, Any, Optional
from pathlib import Path
from .exceptions import DatabaseError
from .paths import get_database_path
from .store import CommandStore, DEFAULT_MOTD_RATE

logger = logging.getLogger(__name__)

class BotDatabase(CommandStore):
    """SQLite database wrapper for admins, dynamic commands and the MOTD"""

    def __init__(self, db_path: str):
        # Use centralized path system if relative path provided
        if not Path(db_path).is_absolute():
            self.db_path = str(get_database_path(db_path))
        else:
            self.db_path = db_path
        self.init_database()

    def init_database(self):
        """Initialize database with required tables"""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS admins (
                    name TEXT UNIQUE NOT NULL
                )
            ''')

            # User defined commands
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS commands (
                    name TEXT UNIQUE NOT NULL,
                    response TEXT NOT NULL
                )
            ''')

            # Message of the day, a single row
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS motd (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    motd TEXT DEFAULT '',
                    rate INTEGER DEFAULT 20,
                    enabled BOOLEAN DEFAULT FALSE
                )
            ''')
            cursor.execute(
                'INSERT OR IGNORE INTO motd (id, motd, rate, enabled) VALUES (1, ?, ?, ?)',
                ('', DEFAULT_MOTD_RATE, False)
            )

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS command_usage (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    command TEXT NOT NULL,
                    user TEXT NOT NULL,
                    channel TEXT NOT NULL,
                    timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
                    success BOOLEAN DEFAULT TRUE,
                    error_message TEXT,
                    execution_time_ms INTEGER DEFAULT 0,
                    memory_usage_mb REAL DEFAULT 0
                )
            ''')

            conn.commit()
            logger.debug(f"Database ready at {self.db_path}")

    @contextmanager
    def get_connection(self):
        """Context manager for database connections"""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row  # Enable dict-like access
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            raise DatabaseError(f"Database operation failed: {e}")
        finally:
            if conn:
                conn.close()

    def _execute(self, sql: str, params: tuple = ()):
        with self.get_connection() as conn:
            conn.execute(sql, params)
            conn.commit()

    # Admin methods
    def is_admin(self, name: str) -> bool:
        try:
            with self.get_connection() as conn:
                row = conn.execute('SELECT 1 FROM admins WHERE name = ?', (name,)).fetchone()
                return row is not None
        except DatabaseError as e:
            logger.error(f"Error checking admin {name}: {e}")
            return False

    def add_admin(self, name: str):
        if self.is_admin(name):
            logger.warning(f"Attempted to re-add admin {name}")
            return
        self._execute('INSERT OR IGNORE INTO admins (name) VALUES (?)', (name,))
        logger.info(f"Added admin {name}")

    def rem_admin(self, name: str):
        self._execute('DELETE FROM admins WHERE name = ?', (name,))
        logger.info(f"Removed admin {name}")

    # Dynamic command methods
    def cmd_exists(self, name: str) -> bool:
        return self.get_cmd_resp(name) is not None

    def add_cmd(self, name: str, template: str):
        self._execute(
            'INSERT OR REPLACE INTO commands (name, response) VALUES (?, ?)',
            (name, template)
        )
        logger.info(f"Stored command {name}")

    def rem_cmd(self, name: str):
        self._execute('DELETE FROM commands WHERE name = ?', (name,))
        logger.info(f"Deleted command {name}")

    def get_cmd_resp(self, name: str) -> Optional[str]:
        try:
            with self.get_connection() as conn:
                row = conn.execute('SELECT response FROM commands WHERE name = ?', (name,)).fetchone()
                return row['response'] if row else None
        except DatabaseError as e:
            logger.error(f"Error getting command response for {name}: {e}")
            return None

    # Message of the day
    def get_motd(self) -> Dict[str, Any]:
        try:
            with self.get_connection() as conn:
                row = conn.execute('SELECT motd, rate, enabled FROM motd WHERE id = 1').fetchone()
                if row:
                    return {'motd': row['motd'] or '', 'rate': row['rate'], 'enabled': bool(row['enabled'])}
        except DatabaseError as e:
            logger.error(f"Error reading motd: {e}")
        return {'motd': '', 'rate': DEFAULT_MOTD_RATE, 'enabled': False}

    def set_motd(self, text: str):
        self._execute('UPDATE motd SET motd = ? WHERE id = 1', (text,))

    def set_motd_enabled(self, enabled: bool):
        self._execute('UPDATE motd SET enabled = ? WHERE id = 1', (bool(enabled),))

    def set_motd_rate(self, minutes: int):
        self._execute('UPDATE motd SET rate = ? WHERE id = 1', (int(minutes),))

    # Command usage tracking
    def log_command_usage(self, command: str, user: str, channel: str, success: bool = True,
                          error: str = None, execution_time_ms: int = 0,
                          memory_usage_mb: float = 0.0):
        """Log command usage for analytics"""
        try:
            self._execute('''
                INSERT INTO command_usage (
                    command, user, channel, success, error_message,
                    execution_time_ms, memory_usage_mb
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
            ''', (command, user, channel, success, error, execution_time_ms, memory_usage_mb))
        except DatabaseError as e:
            logger.error(f"Error logging command usage: {e}")

    def get_command_stats(self, days: int = 7) -> List[Dict[str, Any]]:
        """Get command usage statistics"""
        try:
            with self.get_connection() as conn:
                cursor = conn.execute('''
                    SELECT command, COUNT(*) as usage_count,
                           SUM(CASE WHEN success THEN 1 ELSE 0 END) as success_count,
                           SUM(CASE WHEN success THEN 0 ELSE 1 END) as error_count
                    FROM command_usage
                    WHERE timestamp >= datetime('now', ?)
                    GROUP BY command
                    ORDER BY usage_count DESC
                ''', (f'-{int(days)} days',))
                return [dict(row) for row in cursor.fetchall()]
        except DatabaseError as e:
            logger.error(f"Error getting command stats: {e}")
            return []
