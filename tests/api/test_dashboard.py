from datetime import datetime, timezone


async def test_quick_actions(client, admin_headers):
    response = await client.get("/admin/dashboard/quick-actions", headers=admin_headers)

    assert response.status_code == 200
    assert [action["href"] for action in response.json()] == [
        "/admin/products?action=add", "/admin/categories", "/admin/orders",
    ]


async def test_report_download(client, admin_headers, make_order):
    make_order(id="ord-1", order_date=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
    make_order(id="ord-2", order_date=datetime(2024, 1, 3, 3, 4, 5, tzinfo=timezone.utc))

    response = await client.get("/admin/reports/orders.csv", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == 'attachment; filename="orders_report.csv"'
    lines = response.text.split("\n")
    assert len(lines) == 3
    assert lines[0] == "Order ID,Customer Name,Customer Email,Order Date,Status,Total Amount"
    assert "2024-01-02 03:04:05" in lines[1]


async def test_report_without_orders(client, admin_headers):
    response = await client.get("/admin/reports/orders.csv", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    data = response.json()
    assert data["success"] is False
    assert [n["title"] for n in data["notifications"]] == ["No Data"]


async def test_report_requires_admin(client, customer_headers):
    response = await client.get("/admin/reports/orders.csv", headers=customer_headers)

    assert response.status_code == 403
