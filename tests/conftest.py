"""
conftest.py — Shared pytest fixtures for the endpoint discovery test suite.
"""

import sys
from pathlib import Path
from textwrap import dedent

import pytest

_ROOT = Path(__file__).parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from endpoint_discovery import DiscoveryConfig, EndpointScanner


CRUD_READ = """\
.arguments
   limit:long
   id.eq:long
   name.like:string
.description:Returns items from your users table
auth.ticket.verify:root, admin
wait.signal:magic.db.mysql.read
   database:magic
   table:users
   columns
      id
      name
return-nodes:x:-/*
"""

CRUD_COUNT = """\
.arguments
   id.eq:long
auth.ticket.verify:root
wait.signal:magic.db.mysql.read
   database:magic
   table:users
   columns
      id
      "count(*) as count"
return-nodes:x:-/*
"""

CRUD_CREATE = """\
.arguments
   name:string
auth.ticket.verify:root
wait.signal:magic.db.mysql.create
   database:magic
   table:users
   values
      name:x:@.arguments/*/name
"""

SQL_STATISTICS = """\
.description:Users per role
.is-statistics:bool:true
auth.ticket.verify:root
wait.mysql.connect:magic
   wait.mysql.select:@"select role, count(*) as count
  from users
  group by role"
   return-nodes:x:-/*
"""

CUSTOM = """\
// Plain script without any database slot
.arguments
   message:string
.description:Echoes back the message
return
   result:x:@.arguments/*/message
"""


def write_files(root: Path, files: dict) -> Path:
    """Create files (relative path -> content) below root."""
    for relative, content in files.items():
        fp = root / relative
        fp.parent.mkdir(parents=True, exist_ok=True)
        fp.write_text(dedent(content), encoding="utf-8")
    return root


@pytest.fixture
def endpoint_tree(tmp_path):
    """A small endpoint folder tree below tmp_path/modules."""
    return write_files(tmp_path, {
        "modules/users/users.get.hl": CRUD_READ,
        "modules/users/users-count.get.hl": CRUD_COUNT,
        "modules/users/users.post.hl": CRUD_CREATE,
        "modules/users/users.patch.hl": CRUD_CREATE,
        "modules/stats/users-per-role.get.hl": SQL_STATISTICS,
        "modules/misc/echo.post.hl": CUSTOM,
        "modules/misc/readme.md": "not an endpoint",
        "modules/.hidden/secret.get.hl": CUSTOM,
        "modules/root-file.get.hl": CUSTOM,
    })


@pytest.fixture
def make_scanner():
    """Factory for scanners rooted at a given folder."""
    def _make(root: Path, **options) -> EndpointScanner:
        return EndpointScanner(DiscoveryConfig(root_folder=str(root), **options))
    return _make
