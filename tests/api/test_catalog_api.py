"""API tests for the master-data CRUD endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

API_PREFIX = "/api/v1"


@pytest.mark.parametrize(
    ("path", "payload", "label"),
    [
        ("/inventory/items", {"code": "I001", "name": "螺丝", "item_type": "raw_material"}, "物料"),
        ("/inventory/warehouses", {"code": "W001", "name": "一号仓"}, "仓库"),
        ("/sales/customers", {"code": "C001", "name": "星河贸易", "email": "buyer@example.com"}, "客户"),
        ("/purchase/suppliers", {"code": "S001", "name": "银河五金", "bank_account": "6222020200112233445"}, "供应商"),
        ("/production/products", {"code": "P001", "name": "整机", "price": 99.9}, "产品"),
        ("/hr/employees", {"code": "E001", "first_name": "三", "last_name": "张", "hire_date": "2023-07-01"}, "员工"),
        ("/system/departments", {"code": "D001", "name": "财务部"}, "部门"),
    ],
)
def test_crud_round(
    client: TestClient,
    auth_headers: dict[str, str],
    path: str,
    payload: dict,
    label: str,
) -> None:
    url = f"{API_PREFIX}{path}"

    created = client.post(url, json=payload, headers=auth_headers)
    assert created.status_code == 201, created.text
    assert created.json()["message"] == f"{label}创建成功"
    entity_id = created.json()["data"]["id"]

    duplicate = client.post(url, json=payload, headers=auth_headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == f"{label}编码已存在"

    listing = client.get(url, headers=auth_headers)
    assert listing.json()["meta"]["total"] == 1

    fetched = client.get(f"{url}/{entity_id}", headers=auth_headers)
    assert fetched.json()["data"]["code"] == payload["code"]

    updated = client.put(f"{url}/{entity_id}", json={"code": f"{payload['code']}-X"}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["message"] == f"{label}更新成功"
    assert updated.json()["data"]["code"] == f"{payload['code']}-X"

    deleted = client.delete(f"{url}/{entity_id}", headers=auth_headers)
    assert deleted.json() == {"success": True, "message": f"{label}删除成功"}

    missing = client.get(f"{url}/{entity_id}", headers=auth_headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == f"{label}不存在"


def test_master_data_lists_default_to_twenty(client: TestClient, auth_headers: dict[str, str]) -> None:
    for index in range(25):
        client.post(
            f"{API_PREFIX}/inventory/warehouses",
            json={"code": f"W{index:03d}", "name": f"仓库{index}"},
            headers=auth_headers,
        )

    response = client.get(f"{API_PREFIX}/inventory/warehouses", headers=auth_headers)

    assert response.json()["meta"]["page_size"] == 20
    assert len(response.json()["data"]) == 20


def test_status_filter_maps_to_active_flag(client: TestClient, auth_headers: dict[str, str]) -> None:
    url = f"{API_PREFIX}/sales/customers"
    client.post(url, json={"code": "C001", "name": "活跃客户"}, headers=auth_headers)
    client.post(url, json={"code": "C002", "name": "停用客户", "is_active": False}, headers=auth_headers)

    inactive = client.get(url, params={"status": "inactive"}, headers=auth_headers)

    assert [customer["code"] for customer in inactive.json()["data"]] == ["C002"]


def test_customer_format_rules(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(
        f"{API_PREFIX}/sales/customers",
        json={"code": "C001", "name": "客户", "email": "bad", "phone": "123"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["details"]["field_errors"] == {
        "email": "email必须是有效的邮箱地址",
        "phone": "phone必须是有效的手机号码",
    }


def test_employee_id_number_is_validated_and_not_returned(client: TestClient, auth_headers: dict[str, str]) -> None:
    url = f"{API_PREFIX}/hr/employees"
    invalid = client.post(
        url,
        json={"code": "E001", "first_name": "三", "last_name": "张", "id_number": "123"},
        headers=auth_headers,
    )
    valid = client.post(
        url,
        json={"code": "E001", "first_name": "三", "last_name": "张", "id_number": "11010519491231002X"},
        headers=auth_headers,
    )

    assert invalid.json()["details"]["field_errors"] == {"id_number": "id_number必须是有效的身份证号码"}
    assert valid.status_code == 201
    assert "id_number" not in valid.json()["data"]


def test_project_dates(client: TestClient, auth_headers: dict[str, str]) -> None:
    url = f"{API_PREFIX}/project/projects"
    invalid = client.post(
        url,
        json={"code": "PR1", "name": "上线", "start_date": "2024-06-01", "end_date": "2024-05-01", "manager_id": 1},
        headers=auth_headers,
    )
    created = client.post(
        url,
        json={"code": "PR1", "name": "上线", "start_date": "2024-06-01", "manager_id": 1},
        headers=auth_headers,
    )
    project_id = created.json()["data"]["id"]
    bad_update = client.put(f"{url}/{project_id}", json={"end_date": "2024-01-01"}, headers=auth_headers)

    assert invalid.status_code == 400
    assert invalid.json()["details"]["field_errors"] == {"end_date": "end_date必须大于或等于start_date"}
    assert created.status_code == 201
    assert created.json()["data"]["status"] == "planning"
    assert bad_update.status_code == 400
    assert bad_update.json()["message"] == "结束日期不能早于开始日期"


def test_department_hierarchy(client: TestClient, auth_headers: dict[str, str]) -> None:
    url = f"{API_PREFIX}/system/departments"
    parent = client.post(url, json={"code": "D001", "name": "总部"}, headers=auth_headers).json()["data"]
    child = client.post(url, json={"code": "D002", "name": "财务部", "parent_id": parent["id"]}, headers=auth_headers)
    orphan = client.post(url, json={"code": "D003", "name": "孤立", "parent_id": 999}, headers=auth_headers)
    delete_parent = client.delete(f"{url}/{parent['id']}", headers=auth_headers)

    assert child.status_code == 201
    assert orphan.json()["message"] == "上级部门不存在"
    assert delete_parent.json()["message"] == "存在下级部门，无法删除"


def test_system_users(client: TestClient, auth_headers: dict[str, str], register_user) -> None:
    register_user("bob")

    listing = client.get(f"{API_PREFIX}/system/users", params={"keyword": "bob"}, headers=auth_headers)
    user_id = listing.json()["data"][0]["id"]
    fetched = client.get(f"{API_PREFIX}/system/users/{user_id}", headers=auth_headers)
    missing = client.get(f"{API_PREFIX}/system/users/999", headers=auth_headers)

    assert listing.json()["meta"]["total"] == 1
    assert fetched.json()["data"]["username"] == "bob"
    assert "password_hash" not in fetched.json()["data"]
    assert missing.json()["message"] == "用户不存在"
