"""Record reader for SQL dumps (INSERT statements)."""
import logging
from typing import Any, Dict, List, Optional, Tuple

import sqlparse
from sqlparse import tokens as T

from recordmap.exceptions import RecordParseError
from recordmap.parser.base import RecordReader

logger = logging.getLogger(__name__)


class SqlInsertReader(RecordReader):
    """
    Read rows out of INSERT INTO t (cols) VALUES (...), (...) statements

    Literals are typed: numbers, quoted strings, NULL, TRUE/FALSE.
    Statements without a column list use col_1, col_2, ... as keys.
    """

    def __init__(self, tables: Optional[List[str]] = None):
        """
        Initialize SqlInsertReader

        Args:
            tables: Only read inserts into these tables (all tables when omitted)
        """
        self.tables = {name.lower() for name in tables} if tables else None

    def read(self, content: str) -> List[Dict[str, Any]]:
        records: List[Dict[str, Any]] = []

        for statement in sqlparse.parse(content):
            if statement.get_type() != "INSERT":
                continue

            table, columns, rows = self._parse_insert(statement)
            if self.tables is not None and table.lower() not in self.tables:
                continue

            for row in rows:
                keys = columns or [f"col_{index + 1}" for index in range(len(row))]
                if len(keys) != len(row):
                    raise RecordParseError(
                        f"INSERT INTO {table}: {len(row)} values for {len(keys)} columns"
                    )
                records.append(dict(zip(keys, row)))

        logger.debug(f"Read {len(records)} records from SQL inserts")
        return records

    def _parse_insert(self, statement) -> Tuple[str, List[str], List[List[Any]]]:
        tokens = [
            t for t in statement.flatten()
            if not t.is_whitespace and t.ttype not in T.Comment
        ]
        position = self._index_of_keyword(tokens, "INTO")
        if position is None:
            raise RecordParseError(f"INSERT without INTO: {str(statement)[:80]}")
        position += 1

        # Table name, possibly schema qualified
        table = ""
        while position < len(tokens) and tokens[position].value != "(" and not self._is_keyword(tokens[position], "VALUES"):
            token = tokens[position]
            if token.value != ".":
                table = self._unquote_identifier(token.value)
            position += 1

        columns: List[str] = []
        if position < len(tokens) and tokens[position].value == "(":
            position += 1
            while position < len(tokens) and tokens[position].value != ")":
                if tokens[position].value != ",":
                    columns.append(self._unquote_identifier(tokens[position].value))
                position += 1
            position += 1

        if position >= len(tokens) or not self._is_keyword(tokens[position], "VALUES"):
            raise RecordParseError(f"INSERT INTO {table} has no VALUES list")

        return table, columns, self._parse_rows(tokens[position + 1:], table)

    def _parse_rows(self, tokens, table: str) -> List[List[Any]]:
        rows: List[List[Any]] = []
        current: Optional[List[Any]] = None
        negate = False

        for token in tokens:
            value = token.value
            if value == "(" and current is None:
                current = []
            elif value == ")" and current is not None:
                rows.append(current)
                current = None
            elif value in (",", ";"):
                continue
            elif current is None:
                raise RecordParseError(f"Unexpected token {value!r} in INSERT INTO {table}")
            elif token.ttype in T.Operator and value == "-":
                negate = True
            else:
                literal = self._literal(token)
                if negate:
                    literal = -literal
                    negate = False
                current.append(literal)

        if current is not None:
            raise RecordParseError(f"Unterminated value list in INSERT INTO {table}")
        return rows

    @staticmethod
    def _literal(token) -> Any:
        value = token.value
        if token.ttype in T.Number:
            if token.ttype in T.Number.Integer:
                return int(value)
            if token.ttype in T.Number.Hexadecimal:
                return int(value, 16)
            return float(value)
        if token.ttype in T.String.Single:
            return value[1:-1].replace("''", "'").replace("\\'", "'")
        if token.ttype in T.String.Symbol:
            return value[1:-1]
        normalized = value.upper()
        if normalized == "NULL":
            return None
        if normalized == "TRUE":
            return True
        if normalized == "FALSE":
            return False
        return value

    @staticmethod
    def _is_keyword(token, word: str) -> bool:
        return token.ttype in T.Keyword and token.normalized == word

    def _index_of_keyword(self, tokens, word: str) -> Optional[int]:
        for index, token in enumerate(tokens):
            if self._is_keyword(token, word):
                return index
        return None

    @staticmethod
    def _unquote_identifier(name: str) -> str:
        if len(name) >= 2 and name[0] == name[-1] and name[0] in ('"', "`"):
            return name[1:-1]
        if name.startswith("[") and name.endswith("]"):
            return name[1:-1]
        return name
