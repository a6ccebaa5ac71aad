import sqlite3
from contextlib import closing

from ens_reverse.errors import StoreUnavailable


class NameDB:
    def __init__(self, db_file):
        self.db_file = db_file
        self._create_tables()

    def _create_tables(self):
        try:
            with closing(sqlite3.connect(self.db_file)) as conn:
                cursor = conn.cursor()
                cursor.execute('''
                    CREATE TABLE IF NOT EXISTS names (
                        node TEXT,
                        name TEXT NOT NULL,
                        updated TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                        PRIMARY KEY (node)
                    )
                ''')
                conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot create names table: {e}") from e

    def set_name(self, node, name):
        try:
            with closing(sqlite3.connect(self.db_file)) as conn:
                cursor = conn.cursor()
                cursor.execute('''
                    INSERT OR REPLACE INTO names (node, name)
                    VALUES (?, ?)
                ''', (bytes(node).hex(), name))
                conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot write name of node 0x{bytes(node).hex()}: {e}") from e

    def get_name(self, node):
        try:
            with closing(sqlite3.connect(self.db_file)) as conn:
                cursor = conn.cursor()
                cursor.execute('''
                    SELECT name FROM names
                    WHERE node = ?
                ''', (bytes(node).hex(),))
                result = cursor.fetchone()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot read name of node 0x{bytes(node).hex()}: {e}") from e
        if result:
            return result[0]
        else:
            return ""
