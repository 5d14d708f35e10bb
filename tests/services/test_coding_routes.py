"""Coding Routes — the Mutation API over HTTP, strict and lenient.

Invariants:
    - Apply/remove answer with the resulting assignment set and its size
    - Strict mode: unknown code → 404 CODE_NOT_FOUND, other dangling ids → 400
    - A rejected request writes nothing (no audit entry)
    - Lenient mode: the same requests succeed, as the store allows
    - Row ids keep their JSON type end to end
"""

import logging

from qualstore.config import Settings


async def _create_code(client, project_url, **fields):
    res = await client.post(f"{project_url}/codes", json=fields)
    assert res.status_code == 201
    return res.json()


# --- Codes --------------------------------------------------------------------

async def test_create_code_defaults(client, project_url):
    code = await _create_code(client, project_url)
    assert code["id"].startswith("code-")
    assert code["name"] == "New Code"
    assert code["level"] == 1
    assert code["frequency"] == 0
    assert code["color"].startswith("#")


async def test_create_code_rejects_bad_level(client, project_url):
    res = await client.post(f"{project_url}/codes", json={"level": 7})
    assert res.status_code == 400
    assert res.json()["error"]["details"][0]["field"].startswith("body.level")


async def test_create_child_code_with_unknown_parent(client, project_url):
    res = await client.post(f"{project_url}/codes", json={"parent_id": "code-x"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "PARENT_CODE_NOT_FOUND"
    assert (await client.get(f"{project_url}/codes")).json() == []


async def test_theme_a_scenario(client, project_url):
    code = await _create_code(client, project_url, name="Theme A")
    res = await client.post(
        f"{project_url}/codes/{code['id']}/apply", json={"row_ids": [1, 2, 3]},
    )
    assert res.status_code == 200
    assert res.json() == {"code_id": code["id"], "row_ids": [1, 2, 3], "frequency": 3}

    by_row = (await client.get(f"{project_url}/analytics/assignments-by-row")).json()
    assert by_row["1"] == [code["id"]]

    res = await client.post(
        f"{project_url}/codes/{code['id']}/remove", json={"row_ids": [2]},
    )
    assert res.json()["frequency"] == 2
    codes = (await client.get(f"{project_url}/codes")).json()
    assert codes[0]["frequency"] == 2


async def test_row_id_types_preserved(client, project_url):
    code = await _create_code(client, project_url)
    res = await client.post(
        f"{project_url}/codes/{code['id']}/apply", json={"row_ids": [1, "1"]},
    )
    assert res.json()["row_ids"] == [1, "1"]


async def test_apply_rejects_float_row_ids(client, project_url):
    code = await _create_code(client, project_url)
    res = await client.post(
        f"{project_url}/codes/{code['id']}/apply", json={"row_ids": [1.5]},
    )
    assert res.status_code == 400


async def test_apply_unknown_code_strict_is_404(client, project_url):
    res = await client.post(
        f"{project_url}/codes/code-ghost/apply", json={"row_ids": [1]},
    )
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "CODE_NOT_FOUND"
    assert error["context"]["code_id"] == "code-ghost"
    assert (await client.get(f"{project_url}/events")).json() == []


async def test_apply_unknown_code_lenient_succeeds(lenient_client, lenient_project_url):
    res = await lenient_client.post(
        f"{lenient_project_url}/codes/code-ghost/apply", json={"row_ids": [1]},
    )
    assert res.status_code == 200
    assert res.json()["row_ids"] == [1]


async def test_empty_apply_is_noop(client, project_url):
    code = await _create_code(client, project_url)
    res = await client.post(
        f"{project_url}/codes/{code['id']}/apply", json={"row_ids": []},
    )
    assert res.json()["frequency"] == 0
    assert len((await client.get(f"{project_url}/events")).json()) == 1


async def test_events_record_coder_and_rows(client, project_url):
    code = await _create_code(client, project_url, created_by="ana")
    await client.post(
        f"{project_url}/codes/{code['id']}/apply",
        json={"row_ids": [4, 5], "coder": "bo", "notes": "first pass"},
    )
    events = (await client.get(f"{project_url}/events")).json()
    assert [e["action"] for e in events] == ["create", "apply"]
    assert events[0]["coder"] == "ana"
    assert events[1]["data_point_ids"] == [4, 5]
    assert events[1]["coder"] == "bo"
    assert events[1]["notes"] == "first pass"


# --- Memos --------------------------------------------------------------------

async def test_memos_newest_first(client, project_url):
    code = await _create_code(client, project_url)
    for content in ("old", "new"):
        res = await client.post(
            f"{project_url}/memos",
            json={"content": content, "memo_type": "observational", "linked_codes": [code["id"]]},
        )
        assert res.status_code == 201
    memos = (await client.get(f"{project_url}/memos")).json()
    assert [m["content"] for m in memos] == ["new", "old"]


async def test_memo_with_unknown_link_strict_is_400(client, project_url):
    res = await client.post(
        f"{project_url}/memos",
        json={"content": "m", "memo_type": "theoretical", "linked_codes": ["code-x"]},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MEMO_LINK_NOT_FOUND"


# --- Relations ----------------------------------------------------------------

async def test_create_relation(client, project_url):
    a = await _create_code(client, project_url)
    b = await _create_code(client, project_url)
    res = await client.post(
        f"{project_url}/relations",
        json={"from_code": a["id"], "to_code": b["id"], "relation_type": "causes", "strength": 0.4},
    )
    assert res.status_code == 201
    assert res.json()["relation_type"] == "causes"
    assert len((await client.get(f"{project_url}/relations")).json()) == 1


async def test_relation_with_unknown_endpoint(app, client, project_url):
    a = await _create_code(client, project_url)
    body = {"from_code": a["id"], "to_code": "code-x", "relation_type": "is-a"}

    res = await client.post(f"{project_url}/relations", json=body)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "RELATION_ENDPOINT_NOT_FOUND"
    assert res.json()["error"]["details"] == {"missing": ["code-x"]}
    assert (await client.get(f"{project_url}/relations")).json() == []

    app.state.settings = Settings(strict_references=False)
    res = await client.post(f"{project_url}/relations", json=body)
    assert res.status_code == 201


# --- Actors -------------------------------------------------------------------

async def test_actors_and_links(client, project_url):
    nurse = (await client.post(
        f"{project_url}/actors",
        json={"name": "Nurse", "actor_type": "human", "role": "mediator"},
    )).json()
    chart = (await client.post(
        f"{project_url}/actors",
        json={"name": "Chart", "actor_type": "non-human", "role": "intermediary"},
    )).json()

    res = await client.post(
        f"{project_url}/actor-links",
        json={
            "from_actor": nurse["id"], "to_actor": chart["id"],
            "translation_type": "inscription", "data_point_ids": [3, "r-4"],
        },
    )
    assert res.status_code == 201
    assert res.json()["data_point_ids"] == [3, "r-4"]
    assert len((await client.get(f"{project_url}/actors")).json()) == 2
    assert len((await client.get(f"{project_url}/actor-links")).json()) == 1


async def test_actor_link_unknown_actor_strict_is_400(client, project_url):
    res = await client.post(
        f"{project_url}/actor-links",
        json={"from_actor": "actor-x", "to_actor": "actor-y", "translation_type": "t"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "ACTOR_NOT_FOUND"


# --- Temporal codes -----------------------------------------------------------

async def test_temporal_codes(client, project_url):
    code = await _create_code(client, project_url)
    res = await client.post(
        f"{project_url}/temporal-codes",
        json={"code_id": code["id"], "start_time": 1.5, "end_time": 3.0, "video_id": "vid-1"},
    )
    assert res.status_code == 201
    assert res.json()["video_id"] == "vid-1"

    res = await client.post(
        f"{project_url}/temporal-codes",
        json={"code_id": code["id"], "start_time": 3.0, "end_time": 1.0, "video_id": 1},
    )
    assert res.status_code == 400


# --- App settings -------------------------------------------------------------

async def test_app_uses_settings_it_was_built_with(lenient_app, lenient_client):
    assert lenient_app.state.settings.strict_references is False
    project = (await lenient_client.post("/api/v1/projects", json={"name": "p"})).json()
    url = f"/api/v1/projects/{project['id']}"

    res = await lenient_client.post(f"{url}/codes/code-ghost/apply", json={"row_ids": [1]})
    assert res.status_code == 200
    res = await lenient_client.post(f"{url}/codes", json={"parent_id": "code-x"})
    assert res.status_code == 201
    assert res.json()["parent_id"] == "code-x"


# --- Error reporting ----------------------------------------------------------

async def test_rejected_reference_logged_with_store_context(client, project_url, caplog):
    caplog.set_level(logging.WARNING, logger="qualstore.api.error_handlers")
    await client.post(f"{project_url}/codes/code-ghost/apply", json={"row_ids": [1]})

    (record,) = [r for r in caplog.records if r.name == "qualstore.api.error_handlers"]
    assert record.levelno == logging.WARNING
    assert record.error_code == "CODE_NOT_FOUND"
    assert record.code_id == "code-ghost"
    assert record.project_id == project_url.rsplit("/", 1)[-1]
    assert record.path == f"{project_url}/codes/code-ghost/apply"


async def test_validation_error_logged_with_path(client, project_url, caplog):
    caplog.set_level(logging.WARNING, logger="qualstore.api.error_handlers")
    await client.post(f"{project_url}/codes", json={"level": 9})
    (record,) = [r for r in caplog.records if r.name == "qualstore.api.error_handlers"]
    assert record.error_code == "VALIDATION_ERROR"
    assert record.path == f"{project_url}/codes"
