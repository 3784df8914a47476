#!/usr/bin/env python3
"""
Metadata Extractor
===================
Pulls the declarative nodes out of a parsed endpoint script.

Only top-level nodes are inspected:
- [.arguments]          -> input (name + declared type per argument)
- [auth.ticket.verify]  -> auth (every occurrence, comma separated roles)
- [.description]        -> description

Absent nodes yield None so the field is left out of the manifest.
"""

import logging
from typing import List, Optional

from .base import Field, Node

logger = logging.getLogger("endpoint_discovery.metadata")

ARGUMENTS = ".arguments"
DESCRIPTION = ".description"
TICKET_VERIFY = "auth.ticket.verify"


class MetadataExtractor:
    """Reads arguments, authorization and description from a script tree."""

    @staticmethod
    def get_input_arguments(lambda_: Node) -> Optional[Node]:
        """
        Clone the children of the first [.arguments] node.

        Returns an "input" node, or None when there is no [.arguments] node
        or it declares nothing.
        """
        args = lambda_.first(ARGUMENTS)
        if args is None or not args.children:
            return None
        return Node("input", children=[c.clone() for c in args.children])

    @staticmethod
    def get_authorization(lambda_: Node) -> Optional[List[str]]:
        """
        Collect roles from every [auth.ticket.verify] node, in order.

        Repeated roles are kept; several directives accumulate.
        """
        roles: List[str] = []
        found = False
        for idx in lambda_.children_named(TICKET_VERIFY):
            found = True
            value = idx.get_str()
            if not value:
                continue
            roles.extend(r.strip() for r in value.split(",") if r.strip())
        if not roles:
            if found:
                logger.debug("auth.ticket.verify without roles")
            return None
        return roles

    @staticmethod
    def get_description(lambda_: Node) -> Optional[str]:
        node = lambda_.first(DESCRIPTION)
        if node is None:
            return None
        return node.get_str() or None

    @staticmethod
    def to_fields(input_node: Optional[Node]) -> Optional[List[Field]]:
        if input_node is None:
            return None
        return [Field.from_node(n) for n in input_node.children]
