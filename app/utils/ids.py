"""Identifier utilities."""

from __future__ import annotations

import secrets
import string
import uuid


def generate_batch_id() -> str:
  """Return a new mockup batch identifier."""
  return f"batch_{uuid.uuid4().hex}"


def generate_job_id() -> str:
  """Return a new generation job identifier."""
  return f"job_{generate_nanoid(12)}"


def generate_nanoid(size: int = 16) -> str:
  """Return a short non-sequential id suitable for public references."""
  alphabet = string.ascii_letters + string.digits
  return "".join(secrets.choice(alphabet) for _ in range(size))
