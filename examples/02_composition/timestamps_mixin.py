#!/usr/bin/env python3
"""
Sharing attribute declarations through composition units.

This example demonstrates:
- Declaring a unit with mixin=True
- Automatic composition when a class derives from the unit
- Explicit composition with compose()
- Per-class isolation of type-level values

Usage:
    python timestamps_mixin.py
"""

import logging
import pathlib
import sys
import time

# Add the project root to the path
project_root = str(pathlib.Path(__file__).resolve().parents[2])
sys.path.append(project_root) if project_root not in sys.path else None

from cattri import Cattri, attribute_source, cattri, compose

lg = logging.getLogger("example")


class Timestamps(Cattri, mixin=True):
    created_at = cattri(time.time, expose="read")
    updated_at = cattri(None, predicate=True)


class Tracked(Cattri, mixin=True):
    changes = cattri(list, scope="type")


class Document(Timestamps, Tracked):
    title = cattri("untitled")

    def touch(self) -> None:
        self.updated_at = time.time()
        type(self).changes.append(self.title)


class Report(Document):
    pass


class Note(Cattri):
    body = cattri("")


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)-5s %(message)s")

    doc = Document()
    doc.title = "draft"
    lg.info("updated yet: %s", doc.updated_at_p)
    doc.touch()
    lg.info("updated yet: %s", doc.updated_at_p)

    Report().touch()
    lg.info("document changes: %s, report changes: %s", Document.changes, Report.changes)
    source = attribute_source(Document, "created_at")
    lg.info("created_at declared by %s", source.__name__)

    compose(Note, Timestamps)
    note = Note()
    lg.info("note created at %.0f, updated: %s", note.created_at, note.updated_at_p)
    return 0


if __name__ == "__main__":
    sys.exit(main())
