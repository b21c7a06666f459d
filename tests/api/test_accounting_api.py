"""API tests for accounts, journal entries and payments."""

from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

API_PREFIX = "/api/v1"
ACCOUNTING = f"{API_PREFIX}/accounting"


@pytest.fixture
def cash_and_revenue(create_account) -> tuple[dict, dict]:
    return create_account("1001", "库存现金"), create_account("6001", "主营业务收入", "revenue")


def _journal_payload(debit_account: int, credit_account: int, debit: float = 100, credit: float = 100) -> dict:
    return {
        "date": "2024-03-15",
        "reference": "INV-001",
        "description": "销售收入",
        "items": [
            {"account_id": debit_account, "debit_amount": debit, "description": "收款"},
            {"account_id": credit_account, "credit_amount": credit},
        ],
    }


# ==================== 科目 ====================


def test_create_and_get_account(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(
        f"{ACCOUNTING}/accounts",
        json={"code": "1001", "name": "库存现金", "account_type": "asset"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["message"] == "科目创建成功"
    account = payload["data"]
    assert account["code"] == "1001"
    assert account["currency"] == "CNY"
    assert account["status"] == "active"
    assert account["balance"] == 0

    fetched = client.get(f"{ACCOUNTING}/accounts/{account['id']}", headers=auth_headers)
    by_code = client.get(f"{ACCOUNTING}/accounts/code/1001", headers=auth_headers)

    assert fetched.json()["data"]["name"] == "库存现金"
    assert by_code.json()["data"]["id"] == account["id"]


def test_duplicate_account_code_conflicts(client: TestClient, auth_headers: dict[str, str], create_account) -> None:
    create_account("1001")

    response = client.post(
        f"{ACCOUNTING}/accounts",
        json={"code": "1001", "name": "重复", "account_type": "asset"},
        headers=auth_headers,
    )

    assert response.status_code == 409
    assert response.json()["message"] == "科目编码已存在"


def test_account_validation_errors(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(
        f"{ACCOUNTING}/accounts",
        json={"code": "abc", "account_type": "cash"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload == {
        "success": False,
        "message": "输入数据验证失败",
        "error": "VALIDATION_ERROR",
        "details": {
            "field_errors": {
                "code": "code必须是有效的科目编码",
                "name": "name是必填字段",
                "account_type": "account_type必须是以下值之一: asset liability equity revenue expense",
            },
        },
    }


def test_list_accounts_clamps_pagination(client: TestClient, auth_headers: dict[str, str], create_account) -> None:
    create_account("1001")
    create_account("1002")
    create_account("2001", account_type="liability")

    response = client.get(
        f"{ACCOUNTING}/accounts",
        params={"account_type": "asset", "page": 0, "page_size": 500},
        headers=auth_headers,
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["meta"]["page"] == 1
    assert payload["meta"]["page_size"] == 100
    assert payload["meta"]["total"] == 2
    assert {account["code"] for account in payload["data"]} == {"1001", "1002"}


@pytest.mark.parametrize(
    ("page_size", "effective"),
    [(-5, 1), (0, 1), (1, 1), (100, 100), (101, 100), (1000, 100)],
)
def test_list_page_size_is_always_clamped(
    client: TestClient, auth_headers: dict[str, str], create_account, page_size: int, effective: int
) -> None:
    create_account("1001")
    create_account("1002")

    response = client.get(f"{ACCOUNTING}/accounts", params={"page_size": page_size}, headers=auth_headers)

    assert response.status_code == 200
    payload = response.json()
    assert payload["meta"]["page_size"] == effective
    assert len(payload["data"]) == min(effective, 2)


def test_list_accounts_with_huge_page_returns_empty_page(
    client: TestClient, auth_headers: dict[str, str], create_account
) -> None:
    create_account("1001")

    response = client.get(
        f"{ACCOUNTING}/accounts",
        params={"page": "99999999999999999999999"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["data"] == []
    assert payload["meta"]["page"] == 1_000_000
    assert payload["meta"]["total"] == 1


def test_list_accounts_default_page_size_and_sorting(
    client: TestClient,
    auth_headers: dict[str, str],
    create_account,
) -> None:
    for index in range(12):
        create_account(f"{1001 + index}")

    first_page = client.get(f"{ACCOUNTING}/accounts", params={"sort_by": "code", "sort_order": "asc"}, headers=auth_headers)
    payload = first_page.json()

    assert payload["meta"] == {
        "page": 1,
        "page_size": 10,
        "total": 12,
        "total_pages": 2,
        "has_next": True,
        "has_prev": False,
    }
    assert payload["data"][0]["code"] == "1001"


def test_list_accounts_keyword(client: TestClient, auth_headers: dict[str, str], create_account) -> None:
    create_account("1001", "库存现金")
    create_account("1002", "银行存款")

    response = client.get(f"{ACCOUNTING}/accounts", params={"keyword": "现金"}, headers=auth_headers)

    assert [account["code"] for account in response.json()["data"]] == ["1001"]


def test_list_accounts_rejects_unknown_type(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get(f"{ACCOUNTING}/accounts", params={"account_type": "cash"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "无效的科目类型"


def test_account_hierarchy_rules(client: TestClient, auth_headers: dict[str, str], create_account) -> None:
    parent = create_account("1001")
    child = create_account("1001.01", parent_id=parent["id"])

    mismatched = client.post(
        f"{ACCOUNTING}/accounts",
        json={"code": "1001.02", "name": "错误类型", "account_type": "liability", "parent_id": parent["id"]},
        headers=auth_headers,
    )
    self_parent = client.put(
        f"{ACCOUNTING}/accounts/{parent['id']}",
        json={"parent_id": parent["id"]},
        headers=auth_headers,
    )
    cycle = client.put(
        f"{ACCOUNTING}/accounts/{parent['id']}",
        json={"parent_id": child["id"]},
        headers=auth_headers,
    )
    children = client.get(f"{ACCOUNTING}/accounts/{parent['id']}/children", headers=auth_headers)
    delete_parent = client.delete(f"{ACCOUNTING}/accounts/{parent['id']}", headers=auth_headers)

    assert mismatched.status_code == 400
    assert mismatched.json()["message"] == "子科目类型必须与父科目类型一致"
    assert self_parent.json()["message"] == "科目不能以自己作为父科目"
    assert cycle.json()["message"] == "不能形成循环引用"
    assert [account["code"] for account in children.json()["data"]] == ["1001.01"]
    assert delete_parent.status_code == 400
    assert delete_parent.json()["message"] == "存在子科目，无法删除"


def test_partial_update_keeps_other_fields(client: TestClient, auth_headers: dict[str, str], create_account) -> None:
    account = create_account("1001", "库存现金", description="现金")

    response = client.put(
        f"{ACCOUNTING}/accounts/{account['id']}",
        json={"name": "现金", "description": None},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["message"] == "科目更新成功"
    data = response.json()["data"]
    assert data["name"] == "现金"
    assert data["description"] == "现金"
    assert data["code"] == "1001"


def test_delete_account(client: TestClient, auth_headers: dict[str, str], create_account) -> None:
    account = create_account("1001")

    deleted = client.delete(f"{ACCOUNTING}/accounts/{account['id']}", headers=auth_headers)
    missing = client.get(f"{ACCOUNTING}/accounts/{account['id']}", headers=auth_headers)

    assert deleted.json() == {"success": True, "message": "科目删除成功"}
    assert missing.status_code == 404


def test_delete_missing_account(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.delete(f"{ACCOUNTING}/accounts/999999", headers=auth_headers)

    assert response.status_code == 404
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "科目不存在"
    assert "data" not in payload


@pytest.mark.parametrize("raw_id", ["abc", "0", "-1", "1.5", "4294967296", "99999999999999999999999"])
@pytest.mark.parametrize("method", ["GET", "DELETE"])
def test_malformed_id(client: TestClient, auth_headers: dict[str, str], method: str, raw_id: str) -> None:
    response = client.request(method, f"{ACCOUNTING}/accounts/{raw_id}", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "ID格式错误"


def test_largest_id_is_accepted(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get(f"{ACCOUNTING}/accounts/4294967295", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "科目不存在"


def test_account_types(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get(f"{ACCOUNTING}/account-types", headers=auth_headers)

    values = [item["value"] for item in response.json()["data"]]
    assert values == ["asset", "liability", "equity", "revenue", "expense"]


# ==================== 会计分录 ====================


def test_create_journal_entry(
    client: TestClient,
    auth_headers: dict[str, str],
    cash_and_revenue: tuple[dict, dict],
) -> None:
    cash, revenue = cash_and_revenue

    response = client.post(
        f"{ACCOUNTING}/journal-entries",
        json=_journal_payload(cash["id"], revenue["id"]),
        headers=auth_headers,
    )

    assert response.status_code == 201, response.text
    entry = response.json()["data"]
    assert entry["number"].startswith("JE-20240315-")
    assert entry["date"] == "2024-03-15"
    assert entry["total_debit"] == entry["total_credit"] == 100
    assert entry["status"] == "posted"
    assert entry["created_by"] is not None
    assert [item["account_code"] for item in entry["items"]] == ["1001", "6001"]


def test_unbalanced_journal_entry_is_rejected(
    client: TestClient,
    auth_headers: dict[str, str],
    cash_and_revenue: tuple[dict, dict],
) -> None:
    cash, revenue = cash_and_revenue

    response = client.post(
        f"{ACCOUNTING}/journal-entries",
        json=_journal_payload(cash["id"], revenue["id"], debit=100, credit=80),
        headers=auth_headers,
    )
    listing = client.get(f"{ACCOUNTING}/journal-entries", headers=auth_headers)

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "借贷金额不平衡"
    assert listing.json()["meta"]["total"] == 0


def test_balance_uses_exact_decimal_sums(
    client: TestClient,
    auth_headers: dict[str, str],
    cash_and_revenue: tuple[dict, dict],
) -> None:
    cash, revenue = cash_and_revenue
    payload = {
        "date": "2024-03-15",
        "description": "拆分收款",
        "items": [
            {"account_id": cash["id"], "debit_amount": 0.1},
            {"account_id": cash["id"], "debit_amount": 0.2},
            {"account_id": revenue["id"], "credit_amount": 0.3},
        ],
    }

    response = client.post(f"{ACCOUNTING}/journal-entries", json=payload, headers=auth_headers)

    assert response.status_code == 201, response.text


@pytest.mark.parametrize(
    ("items", "message"),
    [
        (
            [{"account_id": 1, "debit_amount": 0, "credit_amount": 0}, {"account_id": 2, "credit_amount": 0}],
            "第1行借方和贷方金额不能同时为零",
        ),
        (
            [
                {"account_id": 1, "debit_amount": 50, "credit_amount": 50},
                {"account_id": 2, "debit_amount": 10, "credit_amount": 10},
            ],
            "第1行不能同时有借方和贷方金额",
        ),
        (
            [{"account_id": 1, "debit_amount": 10}, {"account_id": 99, "credit_amount": 10}],
            "科目ID 99 不存在",
        ),
    ],
)
def test_journal_line_rules(
    client: TestClient,
    auth_headers: dict[str, str],
    cash_and_revenue: tuple[dict, dict],
    items: list[dict],
    message: str,
) -> None:
    response = client.post(
        f"{ACCOUNTING}/journal-entries",
        json={"date": "2024-03-15", "description": "测试", "items": items},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == message


def test_update_and_delete_journal_entry(
    client: TestClient,
    auth_headers: dict[str, str],
    cash_and_revenue: tuple[dict, dict],
) -> None:
    cash, revenue = cash_and_revenue
    created = client.post(
        f"{ACCOUNTING}/journal-entries",
        json=_journal_payload(cash["id"], revenue["id"]),
        headers=auth_headers,
    ).json()["data"]

    updated = client.put(
        f"{ACCOUNTING}/journal-entries/{created['id']}",
        json={"description": "更正", "items": [
            {"account_id": cash["id"], "debit_amount": 250},
            {"account_id": revenue["id"], "credit_amount": 250},
        ]},
        headers=auth_headers,
    )
    unbalanced = client.put(
        f"{ACCOUNTING}/journal-entries/{created['id']}",
        json={"items": [
            {"account_id": cash["id"], "debit_amount": 1},
            {"account_id": revenue["id"], "credit_amount": 2},
        ]},
        headers=auth_headers,
    )
    referenced = client.delete(f"{ACCOUNTING}/accounts/{cash['id']}", headers=auth_headers)
    deleted = client.delete(f"{ACCOUNTING}/journal-entries/{created['id']}", headers=auth_headers)
    missing = client.get(f"{ACCOUNTING}/journal-entries/{created['id']}", headers=auth_headers)

    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["description"] == "更正"
    assert data["total_debit"] == 250
    assert len(data["items"]) == 2
    assert data["number"] == created["number"]
    assert unbalanced.status_code == 400
    assert referenced.json()["message"] == "科目已被会计分录引用，无法删除"
    assert deleted.json()["message"] == "分录删除成功"
    assert missing.status_code == 404
    assert missing.json()["message"] == "分录不存在"


def test_replacing_items_releases_previous_accounts(
    client: TestClient,
    auth_headers: dict[str, str],
    cash_and_revenue: tuple[dict, dict],
    create_account,
) -> None:
    cash, revenue = cash_and_revenue
    bank = create_account("1002", "银行存款")
    created = client.post(
        f"{ACCOUNTING}/journal-entries",
        json=_journal_payload(cash["id"], revenue["id"]),
        headers=auth_headers,
    ).json()["data"]

    updated = client.put(
        f"{ACCOUNTING}/journal-entries/{created['id']}",
        json={"items": [
            {"account_id": bank["id"], "debit_amount": 100},
            {"account_id": revenue["id"], "credit_amount": 100},
        ]},
        headers=auth_headers,
    )
    released = client.delete(f"{ACCOUNTING}/accounts/{cash['id']}", headers=auth_headers)

    assert updated.status_code == 200
    assert [item["account_id"] for item in updated.json()["data"]["items"]] == [bank["id"], revenue["id"]]
    assert released.status_code == 200


def test_list_journal_entries_by_date_range(
    client: TestClient,
    auth_headers: dict[str, str],
    cash_and_revenue: tuple[dict, dict],
) -> None:
    cash, revenue = cash_and_revenue
    for day in ("2024-01-10", "2024-02-10", "2024-03-10"):
        payload = _journal_payload(cash["id"], revenue["id"])
        payload["date"] = day
        client.post(f"{ACCOUNTING}/journal-entries", json=payload, headers=auth_headers)

    response = client.get(
        f"{ACCOUNTING}/journal-entries",
        params={"start_date": "2024-02-01", "end_date": "2024-03-31"},
        headers=auth_headers,
    )

    assert response.json()["meta"]["total"] == 2


# ==================== 收付款 ====================


def _payment_payload(account_id: int, **overrides) -> dict:
    return {
        "payment_type": "receipt",
        "amount": 500,
        "payment_date": "2024-04-01",
        "account_id": account_id,
        "payment_method": "bank_transfer",
        **overrides,
    }


def test_payment_lifecycle(client: TestClient, auth_headers: dict[str, str], create_account) -> None:
    bank = create_account("1002", "银行存款")

    created = client.post(f"{ACCOUNTING}/payments", json=_payment_payload(bank["id"]), headers=auth_headers)
    payment = created.json()["data"]
    edited = client.put(f"{ACCOUNTING}/payments/{payment['id']}", json={"amount": 600}, headers=auth_headers)
    completed = client.put(
        f"{ACCOUNTING}/payments/{payment['id']}/status",
        json={"status": "completed"},
        headers=auth_headers,
    )
    reopened = client.put(
        f"{ACCOUNTING}/payments/{payment['id']}/status",
        json={"status": "pending"},
        headers=auth_headers,
    )
    edit_completed = client.put(f"{ACCOUNTING}/payments/{payment['id']}", json={"amount": 700}, headers=auth_headers)
    delete_completed = client.delete(f"{ACCOUNTING}/payments/{payment['id']}", headers=auth_headers)

    assert created.status_code == 201
    assert payment["number"].startswith("PAY-20240401-")
    assert payment["status"] == "pending"
    assert edited.json()["data"]["amount"] == 600
    assert completed.json()["data"]["status"] == "completed"
    assert reopened.status_code == 400
    assert reopened.json()["message"] == "付款状态不允许变更"
    assert edit_completed.json()["message"] == "只有待处理的付款记录可以修改"
    assert delete_completed.json()["message"] == "已完成的付款记录不能删除"


def test_payment_status_must_be_known(client: TestClient, auth_headers: dict[str, str], create_account) -> None:
    bank = create_account("1002")
    payment = client.post(f"{ACCOUNTING}/payments", json=_payment_payload(bank["id"]), headers=auth_headers).json()["data"]

    response = client.put(
        f"{ACCOUNTING}/payments/{payment['id']}/status",
        json={"status": "refunded"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["details"]["field_errors"] == {
        "status": "status必须是以下值之一: pending completed cancelled",
    }


def test_payment_requires_existing_account(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(f"{ACCOUNTING}/payments", json=_payment_payload(42), headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "科目ID 42 不存在"


def test_payment_account_id_out_of_range(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(
        f"{ACCOUNTING}/payments",
        json=_payment_payload(10**23),
        headers=auth_headers,
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["message"] == "输入数据验证失败"
    assert payload["details"]["field_errors"] == {"account_id": "account_id必须小于或等于4294967295"}


def test_list_payments_by_type(client: TestClient, auth_headers: dict[str, str], create_account) -> None:
    bank = create_account("1002")
    client.post(f"{ACCOUNTING}/payments", json=_payment_payload(bank["id"]), headers=auth_headers)
    client.post(
        f"{ACCOUNTING}/payments",
        json=_payment_payload(bank["id"], payment_type="payment"),
        headers=auth_headers,
    )

    response = client.get(f"{ACCOUNTING}/payments", params={"payment_type": "payment"}, headers=auth_headers)

    assert response.json()["meta"]["total"] == 1
    assert response.json()["data"][0]["payment_type"] == "payment"
