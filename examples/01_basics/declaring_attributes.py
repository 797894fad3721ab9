#!/usr/bin/env python3
"""
Declaring attributes on a class with cattri.

This example demonstrates:
- Instance and type-level attributes with defaults
- Transformers coercing assigned values
- Write-once (final) attributes and predicates
- Visibility blocks and the errors raised for refused access

Usage:
    python declaring_attributes.py          # INFO output
    python declaring_attributes.py --trace  # include cattri's TRACE records
"""

import logging
import pathlib
import sys
import uuid

# Add the project root to the path
project_root = str(pathlib.Path(__file__).resolve().parents[2])
sys.path.append(project_root) if project_root not in sys.path else None

from cattri import (
    TRACE,
    Cattri,
    CattriError,
    attribute_methods,
    cattri,
    final_cattri,
    private,
)

lg = logging.getLogger("example")


class Server(Cattri):
    """Server settings."""

    instances = cattri(0, scope="type")
    version = final_cattri("1.0", scope="type")
    id = final_cattri(lambda: uuid.uuid4().hex)
    host = cattri("localhost")
    port = cattri(8080, transformer=int)
    started = cattri(False, predicate=True)

    with private():
        secret = cattri(None)

    def __init__(self, secret: str) -> None:
        self.secret = secret
        type(self).instances += 1

    def fingerprint(self) -> str:
        return f"{self.id[:8]}:{len(self.secret)}"


def main() -> int:
    level = TRACE if "--trace" in sys.argv else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)-5s %(name)s: %(message)s")

    server = Server("s3cr3t")
    server.port = "9000"
    server.started = True

    lg.info("server %s listening on %s:%d", server.id, server.host, server.port)
    lg.info("started: %s, fingerprint: %s", server.started_p, server.fingerprint())
    lg.info("instances created: %d, version %s", Server.instances, Server.version)
    lg.info("generated names: %s", attribute_methods(Server))

    for action in (
        lambda: setattr(server, "id", "other"),
        lambda: server.secret,
        lambda: setattr(Server, "version", "2.0"),
    ):
        try:
            action()
        except CattriError as e:
            lg.info("refused: %s", e)

    return 0


if __name__ == "__main__":
    sys.exit(main())
