import json
from datetime import date

import pytest
from fastapi.testclient import TestClient

from app import app
from routes.dependencies import get_finance_store, get_text_generator
from services.errors import GENERIC_FAILURE_MESSAGE, ModelUnavailableError

from conftest import FakeGenerator, InMemoryStore


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def client(store, generator):
    app.dependency_overrides[get_finance_store] = lambda: store
    app.dependency_overrides[get_text_generator] = lambda: generator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def post_transaction(client, **overrides):
    payload = {
        "description": "Lunch",
        "amount": 20.0,
        "category": "Food",
        "type": "expense",
        "date": date.today().isoformat(),
    }
    payload.update(overrides)
    return client.post("/api/transactions", json=payload)


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_chat_records_transaction_round_trip(client, store):
    response = client.post("/api/chat", json={"message": "Coffee $4.50"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["agent_type"] == "transaction"
    assert body["transaction"]["amount"] == 4.5
    assert body["transaction"]["category"] == "other"
    assert body["transaction"]["id"] is not None
    assert body["message"].startswith("✅ Transaction recorded: -$4.50 for Coffee $4.50 (other)")

    listing = client.get("/api/transactions").json()
    assert len(listing["transactions"]) == 1
    assert listing["transactions"][0]["description"] == "Coffee $4.50"
    assert listing["summary"]["total_expenses"] == 4.5
    assert listing["summary"]["balance"] == -4.5

    # user turn and assistant turn are both saved, assistant with metadata
    assert [m.role for m in store.messages] == ["user", "assistant"]
    assert json.loads(store.messages[1].context)["source"] == "rules"


def test_chat_transaction_appends_insights(client, store):
    client.post("/api/chat", json={"message": "Received $2000 salary"})

    body = client.post("/api/chat", json={"message": "I spent $100 on dinner"}).json()

    # balance 1900 > 1000
    assert "🟢 Great job!" in body["message"]


def test_chat_question_uses_clarification(client, generator):
    generator.outputs.append(ModelUnavailableError("down"))

    body = client.post("/api/chat", json={"message": "asdkjfh random text"}).json()

    assert body["agent_type"] == "question"
    assert body["requires_clarification"] is True
    assert body["message"] == "What would you like to know about your finances?"
    assert body["clarification_question"] == body["message"]


def test_chat_missing_amount(client, store):
    body = client.post("/api/chat", json={"message": "I bought something nice"}).json()

    assert body["message"] == "How much was the transaction for?"
    assert body["transaction"] is None
    assert store.transactions == []


def test_chat_balance(client):
    post_transaction(client, amount=3000, type="income", category="salary")
    post_transaction(client, amount=1200, category="rent")

    body = client.post("/api/chat", json={"message": "What's my balance?"}).json()

    assert body["agent_type"] == "balance"
    assert "$1800.00" in body["message"]
    assert "🟢" in body["message"]


def test_chat_model_suggestions_are_listed(client, generator):
    generator.outputs.append(json.dumps({
        "type": "suggestion",
        "message": "A few ideas:",
        "suggestions": ["Cook at home", "Cancel unused subscriptions"],
    }))

    body = client.post("/api/chat", json={"message": "ways to save?"}).json()

    assert body["message"] == "A few ideas:\n\nSuggestions:\n• Cook at home\n• Cancel unused subscriptions"


def test_chat_model_budget_alert_lists_suggestions(client, generator, store):
    post_transaction(client, amount=50, category="food")
    post_transaction(client, amount=50, category="food")
    generator.outputs.append(json.dumps({"type": "budget_alert", "message": "Consider a food budget."}))

    body = client.post("/api/chat", json={"message": "should I set a budget?"}).json()

    assert "Budget suggestions:\n• food: $120/month - Based on your average spending of $50.00" in body["message"]


def test_chat_model_insight_appends_proactive_insights(client, generator):
    post_transaction(client, amount=3000, type="income", category="salary")
    generator.outputs.append(json.dumps({"type": "insight", "message": "Looking good."}))

    body = client.post("/api/chat", json={"message": "thoughts on my finances?"}).json()

    assert body["message"].startswith("Looking good.\n\n🟢 Great job!")


@pytest.mark.parametrize("message", ["", "   "])
def test_chat_rejects_empty_message(client, message):
    response = client.post("/api/chat", json={"message": message})
    assert response.status_code == 400


def test_chat_retrieval_failure_is_generic(generator):
    store = InMemoryStore(fail_on={"get_budgets"})
    app.dependency_overrides[get_finance_store] = lambda: store
    app.dependency_overrides[get_text_generator] = lambda: generator
    try:
        with TestClient(app) as client:
            response = client.post("/api/chat", json={"message": "What's my balance?"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": GENERIC_FAILURE_MESSAGE}


def test_chat_history(client):
    client.post("/api/chat", json={"message": "What can you do?"})

    messages = client.get("/api/chat/history").json()["messages"]
    assert [m["role"] for m in messages] == ["assistant", "user"]

    user_only = client.get("/api/chat/history", params={"type": "user"}).json()["messages"]
    assert [m["content"] for m in user_only] == ["What can you do?"]


def test_create_transaction_validation(client):
    response = post_transaction(client, amount=0)

    assert response.status_code == 422
    assert response.json()["detail"] == "Amount must be greater than 0"


def test_create_transaction_normalizes_category(client):
    body = post_transaction(client).json()
    assert body["category"] == "food"


def test_filtered_transactions(client):
    post_transaction(client, amount=15, category="food")
    post_transaction(client, amount=60, category="gas")
    post_transaction(client, amount=500, type="income", category="freelance")

    body = client.get("/api/transactions/filtered", params={"type": "expense", "min_amount": 20}).json()

    assert [t["category"] for t in body["transactions"]] == ["gas"]
    assert body["summary"]["total_expenses"] == 60


def test_filtered_transactions_rejects_inverted_range(client):
    response = client.get(
        "/api/transactions/filtered",
        params={"start_date": "2024-03-10", "end_date": "2024-03-01"},
    )
    assert response.status_code == 400


def test_budgets(client):
    post_transaction(client, amount=80, category="food")
    client.post("/api/budgets", json={"category": "Food", "amount": 50})
    client.post("/api/budgets", json={"category": "food", "amount": 100})

    budgets = client.get("/api/budgets").json()["budgets"]

    assert len(budgets) == 1
    assert budgets[0]["amount"] == 100
    assert budgets[0]["current_spending"] == 80
    assert budgets[0]["percentage"] == 80.0
    assert budgets[0]["status"] == "warning"


def test_insights_endpoint(client):
    post_transaction(client, amount=50, category="food")
    post_transaction(client, amount=50, category="food")

    body = client.get("/api/insights").json()

    assert any("most frequent expense category is food" in line for line in body["insights"])
    assert body["budget_suggestions"][0]["amount"] == 120


def test_financial_overview(client):
    post_transaction(client, amount=3000, type="income", category="salary")
    post_transaction(client, amount=1200, category="rent")

    body = client.get("/api/financial-overview").json()

    assert body["current_balance"] == 1800
    assert body["monthly_expenses"] == 1200
    assert body["transaction_count"] == 2


def test_analytics(client):
    post_transaction(client, amount=15, category="food")
    post_transaction(client, amount=60, category="gas")

    body = client.get("/api/analytics").json()

    assert [c["category"] for c in body["categories"]] == ["gas", "food"]
    assert body["summary"]["total_expenses"] == 75


def test_clear_database(client, store):
    post_transaction(client)
    client.post("/api/chat", json={"message": "What can you do?"})

    assert client.post("/api/database/clear").json()["success"] is True
    assert store.transactions == []
    assert store.messages == []


def test_transaction_fields_survive_round_trip(client):
    post_transaction(client, description="Coffee", amount=5.5, category="food", date="2024-01-01")

    saved = client.get("/api/transactions").json()["transactions"][0]

    assert saved["description"] == "Coffee"
    assert saved["amount"] == 5.5
    assert saved["category"] == "food"
    assert saved["type"] == "expense"
    assert saved["date"] == "2024-01-01"


def test_insights_retrieval_failure_is_generic(generator):
    store = InMemoryStore(fail_on={"get_spending_patterns"})
    app.dependency_overrides[get_finance_store] = lambda: store
    app.dependency_overrides[get_text_generator] = lambda: generator
    try:
        with TestClient(app) as client:
            insights = client.get("/api/insights")
            overview = client.get("/api/financial-overview")
    finally:
        app.dependency_overrides.clear()

    assert insights.status_code == 500
    assert insights.json() == {"detail": GENERIC_FAILURE_MESSAGE}
    # overview does not read spending patterns
    assert overview.status_code == 200
