"""Unit tests for the response envelope builder."""

from __future__ import annotations

import json

from galaxyerp.application.interfaces.egress import Pagination, ResponseBuilder


def _body(response) -> dict:
    return json.loads(response.body)


def test_ok_envelope_omits_empty_fields() -> None:
    response = ResponseBuilder.ok({"id": 1}, "获取成功")

    assert response.status_code == 200
    assert _body(response) == {"success": True, "message": "获取成功", "data": {"id": 1}}


def test_created_uses_201() -> None:
    response = ResponseBuilder.created({"id": 1}, "科目创建成功")

    assert response.status_code == 201
    assert _body(response)["success"] is True


def test_deleted_has_no_data() -> None:
    body = _body(ResponseBuilder.deleted("科目删除成功"))

    assert body == {"success": True, "message": "科目删除成功"}


def test_paginated_carries_meta() -> None:
    response = ResponseBuilder.paginated([{"id": 1}], Pagination.create(page=1, page_size=10, total=1))
    body = _body(response)

    assert body["data"] == [{"id": 1}]
    assert body["meta"] == {
        "page": 1,
        "page_size": 10,
        "total": 1,
        "total_pages": 1,
        "has_next": False,
        "has_prev": False,
    }


def test_failure_never_carries_data() -> None:
    response = ResponseBuilder.bad_request("输入数据验证失败", {"field_errors": {"name": "name是必填字段"}})
    body = _body(response)

    assert response.status_code == 400
    assert body["success"] is False
    assert "data" not in body
    assert body["error"] == "BAD_REQUEST"
    assert body["details"] == {"field_errors": {"name": "name是必填字段"}}


def test_failure_without_details() -> None:
    body = _body(ResponseBuilder.not_found("科目不存在"))

    assert body == {"success": False, "message": "科目不存在", "error": "NOT_FOUND"}


def test_not_implemented_and_internal_error() -> None:
    assert ResponseBuilder.not_implemented().status_code == 501
    response = ResponseBuilder.internal_error()

    assert response.status_code == 500
    assert _body(response)["message"] == "服务器内部错误"
