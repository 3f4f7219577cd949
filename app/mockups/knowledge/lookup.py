"""Strict-or-fallback key resolution shared by the knowledge tables."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TypeVar

from app.mockups.errors import UnknownKnowledgeKeyError

T = TypeVar("T")
logger = logging.getLogger(__name__)


def lookup(table_name: str, table: Mapping[str, T], key: str, *, default: str, strict: bool) -> T:
  """Return `table[key]`, failing loudly in strict mode and falling back to `default` otherwise."""
  value = table.get(key)
  if value is not None:
    return value

  if strict:
    raise UnknownKnowledgeKeyError(table_name, key)

  logger.warning("Unknown %s key '%s'; falling back to '%s'.", table_name, key, default)
  return table[default]
