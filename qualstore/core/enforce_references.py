"""Reference Enforcement — strict existence checks for ids handed to the store.

Invariants:
    - All functions are PURE: no IO, no side effects, store is only read
    - Return error dict on violation, None on success
    - The store itself never calls these (it stays lenient); the HTTP shell
      runs them when strict_references is enabled

Design Decisions:
    - Error dicts over exceptions: callers choose how to surface a violation
      (the shell maps NOT_FOUND codes to 404 and the rest to 400)
"""

from typing import Iterable

from qualstore.core.qualitative_store import QualitativeStore

CODE_NOT_FOUND = "CODE_NOT_FOUND"
PARENT_NOT_FOUND = "PARENT_CODE_NOT_FOUND"
RELATION_ENDPOINT_NOT_FOUND = "RELATION_ENDPOINT_NOT_FOUND"
ACTOR_NOT_FOUND = "ACTOR_NOT_FOUND"
MEMO_LINK_NOT_FOUND = "MEMO_LINK_NOT_FOUND"


def _error(error_code: str, message: str, **fields: object) -> dict:
    return {"status": "error", "error_code": error_code, "message": message, **fields}


def check_code_exists(store: QualitativeStore, code_id: str) -> dict | None:
    """Apply/remove/temporal coding must target a registered code."""
    if not store.has_code(code_id):
        return _error(CODE_NOT_FOUND, f"Code '{code_id}' does not exist.", code_id=code_id)
    return None


def check_parent_code(store: QualitativeStore, parent_id: str | None) -> dict | None:
    """A new code's parent, when given, must already exist."""
    if parent_id is not None and not store.has_code(parent_id):
        return _error(
            PARENT_NOT_FOUND,
            f"Parent code '{parent_id}' does not exist.",
            code_id=parent_id,
        )
    return None


def check_relation_endpoints(
    store: QualitativeStore, from_code: str, to_code: str,
) -> dict | None:
    """Both relation endpoints must be registered codes. Self-loops are allowed."""
    missing = [c for c in (from_code, to_code) if not store.has_code(c)]
    if missing:
        return _error(
            RELATION_ENDPOINT_NOT_FOUND,
            f"Relation references unknown code(s): {', '.join(missing)}.",
            missing=missing,
        )
    return None


def check_actor_link_endpoints(
    store: QualitativeStore, from_actor: str, to_actor: str,
) -> dict | None:
    missing = [a for a in (from_actor, to_actor) if not store.has_actor(a)]
    if missing:
        return _error(
            ACTOR_NOT_FOUND,
            f"Actor link references unknown actor(s): {', '.join(missing)}.",
            missing=missing,
        )
    return None


def check_memo_links(store: QualitativeStore, linked_codes: Iterable[str]) -> dict | None:
    missing = [c for c in linked_codes if not store.has_code(c)]
    if missing:
        return _error(
            MEMO_LINK_NOT_FOUND,
            f"Memo links unknown code(s): {', '.join(missing)}.",
            missing=missing,
        )
    return None


def check_temporal_code(store: QualitativeStore, code_id: str) -> dict | None:
    return check_code_exists(store, code_id)
