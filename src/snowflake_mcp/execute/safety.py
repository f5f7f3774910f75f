"""Statement safety filter for the run_query tool.

A syntactic denylist of mutating verbs, matched as whole words regardless of
case. It catches honest mistakes; it is not a security boundary. Verbs hidden
behind stored procedures or dynamic SQL get through, and a denylisted word
inside a string literal or comment is rejected even though it would not run.
Read-only enforcement belongs to the warehouse role the server connects as.

Optionally, multi-statement batches can be rejected. That check tokenizes with
sqlglot so semicolons inside literals and comments do not count.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Final

from fastmcp.utilities.logging import get_logger
import sqlglot
from sqlglot.errors import TokenError
from sqlglot.tokens import TokenType

from snowflake_mcp.exceptions import PolicyError

_logger = get_logger(__name__)

DENYLISTED_VERBS: Final[tuple[str, ...]] = (
    "UPDATE",
    "DELETE",
    "INSERT",
    "MERGE",
    "DROP",
    "ALTER",
    "TRUNCATE",
)

SELECT_ONLY_REASON: Final[str] = "Only SELECT queries are allowed"
SINGLE_STATEMENT_REASON: Final[str] = "Only a single SQL statement is allowed"
UNPARSEABLE_REASON: Final[str] = "Unable to parse SQL statement"

_DENYLIST_RE: Final[re.Pattern[str]] = re.compile(
    r"\b(?:" + "|".join(DENYLISTED_VERBS) + r")\b", re.IGNORECASE
)


@dataclass(frozen=True, slots=True)
class Allowed:
    """The statement may be submitted to the warehouse."""


@dataclass(frozen=True, slots=True)
class Rejected:
    """The statement must not be submitted; ``reason`` is shown to the caller."""

    reason: str


Verdict = Allowed | Rejected


def find_denylisted_verb(sql: str) -> str | None:
    """Return the first denylisted verb found as a whole word, upper-cased."""
    match = _DENYLIST_RE.search(sql)
    return match.group(0).upper() if match else None


def count_statements(sql: str, dialect: str = "snowflake") -> int:
    """Count non-empty statements separated by top-level semicolons.

    Raises:
        TokenError: If sqlglot cannot tokenize the text
    """
    count = 0
    pending = False
    for token in sqlglot.tokenize(sql, read=dialect):
        if token.token_type == TokenType.SEMICOLON:
            if pending:
                count += 1
            pending = False
        else:
            pending = True
    if pending:
        count += 1
    return count


class StatementSafetyFilter:
    """Classifies SQL text as allowed or rejected."""

    def __init__(self, *, reject_multi_statement: bool = False, dialect: str = "snowflake") -> None:
        self.reject_multi_statement = reject_multi_statement
        self.dialect = dialect

    def classify(self, sql: str) -> Verdict:
        verb = find_denylisted_verb(sql)
        if verb is not None:
            _logger.warning("Rejected statement containing %s", verb)
            return Rejected(SELECT_ONLY_REASON)

        if self.reject_multi_statement:
            try:
                statements = count_statements(sql, self.dialect)
            except TokenError as exc:
                _logger.warning("Rejected statement that failed to tokenize: %s", exc)
                return Rejected(UNPARSEABLE_REASON)
            if statements > 1:
                _logger.warning("Rejected batch of %d statements", statements)
                return Rejected(SINGLE_STATEMENT_REASON)

        return Allowed()

    def enforce(self, sql: str) -> None:
        """Raise :class:`PolicyError` when ``sql`` is rejected."""
        verdict = self.classify(sql)
        if isinstance(verdict, Rejected):
            raise PolicyError(verdict.reason)
