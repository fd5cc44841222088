"""Tests for the dashboard aggregates."""

from conftest import data


class TestDashboard:
    def test_empty(self, client):
        dashboard = data(client.get("/api/dashboard"))
        assert dashboard["stats"]["total_orders"] == 0
        assert dashboard["stats"]["orders_by_status"]["pending"] == 0
        assert dashboard["financial_overview"]["net_balance"] == 0.0
        assert dashboard["recent_transactions"] == []

    def test_counts_and_totals(self, client, make_order, make_car):
        make_order()
        confirmed = make_order(customer_name="Samir")
        client.post(f"/api/orders/{confirmed['id']}/status", json={"status": "confirmed"})
        make_car()

        client.post(
            "/api/finance/transactions",
            json={
                "type": "Income",
                "category": "Commission",
                "description": "Broker fee",
                "amount": "1000",
                "payment_status": "Partial",
                "paid_amount": "400",
            },
        )
        client.post(
            "/api/finance/transactions",
            json={
                "type": "Expense",
                "category": "Rent",
                "description": "Office rent",
                "amount": "300",
                "payment_status": "Paid",
            },
        )

        dashboard = data(client.get("/api/dashboard"))
        stats = dashboard["stats"]
        assert stats["total_orders"] == 2
        assert stats["orders_by_status"]["pending"] == 1
        assert stats["orders_by_status"]["confirmed"] == 1
        assert stats["total_cars"] == 1
        assert stats["available_cars"] == 1

        overview = dashboard["financial_overview"]
        assert overview == {
            "total_income": 1000.0,
            "total_expenses": 300.0,
            "net_balance": 700.0,
            "outstanding": 600.0,
        }
        assert len(dashboard["recent_transactions"]) == 2
