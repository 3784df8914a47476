"""
CRUD and SQL endpoint classification.

Generated database endpoints follow two recognizable shapes:

- CRUD wrappers invoke one slot (e.g. [wait.signal]) carrying [database] and
  [table] children; the verb decides create/read/update/delete, and a read
  whose [columns] hold "count(*) as count" is a count endpoint.
- Raw SQL endpoints open a connection ([wait.mysql.connect] or
  [wait.mssql.connect]) and run some "<dialect>.select" inside it; a
  top-level [.is-statistics] flag marks statistics endpoints.

Each shape is a MatcherDef; matchers are tried in priority order and the
first one whose anchor node is present decides the outcome.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, NamedTuple, Optional

from .base import EndpointKind, Field, HttpVerb, Node

logger = logging.getLogger("endpoint_discovery.crud")

DEFAULT_CRUD_SLOTS = ("wait.signal", "signal")
DEFAULT_SQL_CONNECT_SLOTS = ("wait.mysql.connect", "wait.mssql.connect")

COUNT_COLUMN = "count(*) as count"
IS_STATISTICS = ".is-statistics"
SELECT_SUFFIX = ".select"


class Classification(NamedTuple):
    """What a matcher derived for one endpoint."""
    kind: Optional[EndpointKind] = None
    returns: Optional[List[Field]] = None
    array: Optional[bool] = None


NOTHING = Classification()


class MatcherDef(NamedTuple):
    """Definition of a classification rule."""
    label: str
    anchor: Callable[[Node], Optional[Node]]
    classify: Callable[[Node, Node, HttpVerb, Optional[Node]], Classification]


# =============================================================================
# CRUD WRAPPERS
# =============================================================================

def find_crud_slot(lambda_: Node, slot_names: Iterable[str]) -> Optional[Node]:
    """Last invocation of a CRUD slot that names both a database and a table."""
    slot = lambda_.last(*slot_names)
    if slot is not None and slot.has("database") and slot.has("table"):
        return slot
    return None


def classify_crud(lambda_: Node, slot: Node, verb: HttpVerb, args: Optional[Node]) -> Classification:
    if verb is HttpVerb.POST:
        return Classification(kind=EndpointKind.CRUD_CREATE)
    if verb is HttpVerb.PUT:
        return Classification(kind=EndpointKind.CRUD_UPDATE)
    if verb is HttpVerb.DELETE:
        return Classification(kind=EndpointKind.CRUD_DELETE)

    columns = slot.first("columns")
    if columns is None:
        logger.debug("CRUD read slot without [columns], nothing derived")
        return NOTHING

    if columns.has(COUNT_COLUMN):
        return Classification(
            kind=EndpointKind.CRUD_COUNT,
            returns=[Field("count", "long")],
            array=False,
        )

    returns = [Field.from_node(c) for c in columns.children]
    if args is not None:
        # [.arguments][xxx.eq] carries the type of column xxx
        for field in returns:
            match = args.first(field.name + ".eq")
            field.type = match.value if match is not None else None
    return Classification(kind=EndpointKind.CRUD_READ, returns=returns, array=True)


# =============================================================================
# RAW SQL
# =============================================================================

def find_sql_select(connect: Node) -> Optional[Node]:
    """Last node below a connection whose name ends with '.select'."""
    found = None
    for node in connect.descendants():
        if node.name.endswith(SELECT_SUFFIX):
            found = node
    return found


def classify_sql(lambda_: Node, connect: Node, verb: HttpVerb, args: Optional[Node]) -> Classification:
    if find_sql_select(connect) is None:
        return NOTHING
    flag = lambda_.first(IS_STATISTICS)
    if flag is not None and flag.get_bool():
        return Classification(kind=EndpointKind.CRUD_STATISTICS)
    return Classification(kind=EndpointKind.CRUD_SQL)


# =============================================================================
# CLASSIFIER
# =============================================================================

class CrudClassifier:
    """Applies the CRUD wrapper rule, then the raw SQL rule."""

    def __init__(
        self,
        crud_slots: Iterable[str] = DEFAULT_CRUD_SLOTS,
        sql_connect_slots: Iterable[str] = DEFAULT_SQL_CONNECT_SLOTS,
    ):
        self.crud_slots = tuple(crud_slots)
        self.sql_connect_slots = tuple(sql_connect_slots)

    @property
    def matchers(self) -> List[MatcherDef]:
        return [
            MatcherDef(
                label="crud",
                anchor=lambda node: find_crud_slot(node, self.crud_slots),
                classify=classify_crud,
            ),
            MatcherDef(
                label="sql",
                anchor=lambda node: node.last(*self.sql_connect_slots),
                classify=classify_sql,
            ),
        ]

    def classify(self, lambda_: Node, verb: HttpVerb, args: Optional[Node] = None) -> Classification:
        for matcher in self.matchers:
            anchor = matcher.anchor(lambda_)
            if anchor is None:
                continue
            result = matcher.classify(lambda_, anchor, verb, args)
            logger.debug(f"{matcher.label} matcher: {result.kind.value if result.kind else 'no kind'}")
            return result
        return NOTHING
