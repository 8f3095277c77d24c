from __future__ import annotations

from ._errors import DependencyNotWiredError


def assert_wired(*args: object) -> None:
    """Check at runtime that no dependency arrived as None.

    Example:
      class Repository:
          def __init__(self, database: Database, logger: Logger) -> None:
              assert_wired(database, logger)

    """
    missing = [i for i, arg in enumerate(args) if arg is None]
    if missing:
        raise DependencyNotWiredError(missing, len(args))
