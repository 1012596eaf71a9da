from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest
import stripe

from storefront.api.deps import get_chat_service, get_payment_client
from storefront.domain.errors import InvalidRequestError, UpstreamUnavailableError
from storefront.domain.schemas import PaymentLineIn
from storefront.main import app
from storefront.services.chat_client import SYSTEM_PROMPT, ChatService
from storefront.services.notification_service import NotificationService, send_purchase_notification_task
from storefront.services.payment_client import PaymentClient, build_line_items, to_cents


def _completion(content):
    message = MagicMock(content=content)
    return MagicMock(choices=[MagicMock(message=message)])


# chat
def test_openai_chat_returns_first_choice():
    llm = MagicMock()
    llm.chat.completions.create.return_value = _completion("We install panels daily.")
    svc = ChatService(mode="openai", api_key="sk-test", model="m1", client=llm)

    assert svc.reply("Do you install?") == "We install panels daily."

    kwargs = llm.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "m1"
    assert kwargs["max_tokens"] == 400
    assert kwargs["messages"] == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "Do you install?"},
    ]


def test_openai_client_is_built_from_settings():
    with patch("storefront.services.chat_client.OpenAI") as client_cls:
        client_cls.return_value.chat.completions.create.return_value = _completion("Hello")
        svc = ChatService(mode="openai", api_key="sk-test", base_url="https://llm.example.com/v1/", timeout=3)

        assert svc.reply("hi") == "Hello"

    client_cls.assert_called_once_with(
        api_key="sk-test",
        base_url="https://llm.example.com/v1",
        timeout=3,
        max_retries=0,
    )


def test_openai_chat_empty_choice_is_no_reply():
    llm = MagicMock()
    llm.chat.completions.create.return_value = _completion(None)
    assert ChatService(mode="openai", api_key="sk-test", client=llm).reply("hi") == "No reply"


def test_openai_chat_without_key_is_unavailable():
    with pytest.raises(UpstreamUnavailableError):
        ChatService(mode="openai", api_key="").reply("hi")


def test_openai_chat_provider_failure_is_unavailable():
    llm = MagicMock()
    llm.chat.completions.create.side_effect = openai.APIConnectionError(
        request=httpx.Request("POST", "https://llm.example.com/v1/chat/completions")
    )
    svc = ChatService(mode="openai", api_key="sk-test", client=llm)

    with pytest.raises(UpstreamUnavailableError) as exc:
        svc.reply("hi")
    assert exc.value.message == "Chat error"


def test_chat_route_maps_upstream_failure_to_502(client):
    app.dependency_overrides[get_chat_service] = lambda: ChatService(mode="openai", api_key="")
    response = client.post("/api/chat", json={"message": "hi"})
    assert response.status_code == 502
    assert response.json() == {"message": "Chat service not configured"}


# payments
@pytest.mark.parametrize(
    "price,cents",
    [("$123", 12300), ("1,299.99", 129999), (19.995, 2000), (0, 0), ("free", 0), (None, 0)],
)
def test_to_cents(price, cents):
    assert to_cents(price) == cents


def test_build_line_items():
    cart = [
        PaymentLineIn(title="Solar Panel 320W", price="$189", image="images/product1.jpg", qty=2),
        PaymentLineIn(title="Camera", price=129, image="https://cdn.example.com/cam.jpg"),
        PaymentLineIn(price="10"),
    ]

    line_items = build_line_items(cart, "http://shop.local/")

    assert line_items[0] == {
        "quantity": 2,
        "price_data": {
            "currency": "usd",
            "unit_amount": 18900,
            "product_data": {"name": "Solar Panel 320W", "images": ["http://shop.local/images/product1.jpg"]},
        },
    }
    assert line_items[1]["quantity"] == 1
    assert line_items[1]["price_data"]["product_data"]["images"] == ["https://cdn.example.com/cam.jpg"]
    assert line_items[2]["price_data"]["product_data"] == {"name": "Item"}


def test_create_checkout_session_returns_url():
    client = PaymentClient(secret_key="sk_test")
    cart = [PaymentLineIn(title="Battery", price="899", qty=1)]

    with patch(
        "storefront.services.payment_client.stripe.checkout.Session.create",
        return_value=MagicMock(id="cs_1", url="https://checkout.example.com/cs_1"),
    ) as create:
        url = client.create_checkout_session(cart, "http://shop.local/")

    assert url == "https://checkout.example.com/cs_1"
    kwargs = create.call_args.kwargs
    assert kwargs["api_key"] == "sk_test"
    assert kwargs["mode"] == "payment"
    assert kwargs["success_url"] == "http://shop.local/cart?success=1"
    assert kwargs["cancel_url"] == "http://shop.local/cart?canceled=1"
    assert kwargs["line_items"][0]["price_data"]["unit_amount"] == 89900


def test_create_checkout_session_errors():
    cart = [PaymentLineIn(title="Battery", price="899")]

    with pytest.raises(InvalidRequestError):
        PaymentClient(secret_key="sk_test").create_checkout_session([], "http://shop.local/")

    with pytest.raises(UpstreamUnavailableError):
        PaymentClient(secret_key="").create_checkout_session(cart, "http://shop.local/")

    with patch(
        "storefront.services.payment_client.stripe.checkout.Session.create",
        side_effect=stripe.AuthenticationError("Invalid API Key provided"),
    ):
        with pytest.raises(UpstreamUnavailableError) as exc:
            PaymentClient(secret_key="sk_bad").create_checkout_session(cart, "http://shop.local/")
    assert exc.value.message == "Stripe error"


def test_checkout_session_route(client):
    fake = MagicMock()
    fake.create_checkout_session.return_value = "https://checkout.example.com/cs_2"
    app.dependency_overrides[get_payment_client] = lambda: fake

    response = client.post(
        "/create-checkout-session",
        json={"cart": [{"title": "Battery", "price": "$899", "qty": 1}]},
    )

    assert response.status_code == 200
    assert response.json() == {"url": "https://checkout.example.com/cs_2"}
    cart_arg, base_url = fake.create_checkout_session.call_args.args
    assert cart_arg[0].title == "Battery"
    assert base_url == "http://testserver/"


# notifications
def test_notification_task_runs_eagerly():
    assert NotificationService.send_purchase_notification(7, "ana@example.com") is True


def test_notification_task_payload():
    result = send_purchase_notification_task.run(7, "ana@example.com")
    assert result == {"purchase_id": 7, "email": "ana@example.com", "status": "sent"}
