"""Reference Enforcement — tests for pure existence checks.

Tests cover:
    - Each check returns None when references resolve
    - Each check returns an error dict naming the missing ids otherwise
    - Checks never mutate the store
"""

from qualstore.core.enforce_references import (
    check_actor_link_endpoints, check_code_exists, check_memo_links,
    check_parent_code, check_relation_endpoints, check_temporal_code,
    ACTOR_NOT_FOUND, CODE_NOT_FOUND, MEMO_LINK_NOT_FOUND, PARENT_NOT_FOUND,
    RELATION_ENDPOINT_NOT_FOUND,
)


def test_check_code_exists(store):
    code = store.create_code()
    assert check_code_exists(store, code.id) is None
    error = check_code_exists(store, "code-404")
    assert error["status"] == "error"
    assert error["error_code"] == CODE_NOT_FOUND
    assert error["code_id"] == "code-404"


def test_check_parent_code_allows_root_codes(store):
    assert check_parent_code(store, None) is None
    error = check_parent_code(store, "code-404")
    assert error["error_code"] == PARENT_NOT_FOUND


def test_check_relation_endpoints_lists_missing(store):
    code = store.create_code()
    assert check_relation_endpoints(store, code.id, code.id) is None
    error = check_relation_endpoints(store, code.id, "code-404")
    assert error["error_code"] == RELATION_ENDPOINT_NOT_FOUND
    assert error["missing"] == ["code-404"]


def test_check_actor_link_endpoints(store):
    a = store.add_actor("A", "human", "mediator")
    b = store.add_actor("B", "hybrid", "intermediary")
    assert check_actor_link_endpoints(store, a.id, b.id) is None
    error = check_actor_link_endpoints(store, "actor-x", "actor-y")
    assert error["error_code"] == ACTOR_NOT_FOUND
    assert error["missing"] == ["actor-x", "actor-y"]


def test_check_memo_links(store):
    code = store.create_code()
    assert check_memo_links(store, []) is None
    assert check_memo_links(store, [code.id]) is None
    assert check_memo_links(store, [code.id, "code-9"])["error_code"] == MEMO_LINK_NOT_FOUND


def test_check_temporal_code_targets_registered_code(store):
    assert check_temporal_code(store, "code-1")["error_code"] == CODE_NOT_FOUND


def test_checks_do_not_write(store):
    check_code_exists(store, "code-404")
    check_relation_endpoints(store, "a", "b")
    assert store.coding_events.value == ()
    assert store.codes.value == ()
