import json
from urllib.parse import parse_qs

import httpx

from studio_api.services.notifications import NotificationDispatcher, PushMessage, is_expo_push_token

PUSH_URL = "https://push.test/send"


def dispatcher_for(handler, **kwargs) -> NotificationDispatcher:
    transport = httpx.MockTransport(handler)
    return NotificationDispatcher(
        expo_push_url=PUSH_URL,
        client_factory=lambda **kw: httpx.Client(transport=transport, **kw),
        **kwargs,
    )


def test_expo_token_shape():
    assert is_expo_push_token("ExponentPushToken[abc]")
    assert is_expo_push_token("ExpoPushToken[abc]")
    assert not is_expo_push_token("abc")
    assert not is_expo_push_token("")


def test_push_is_chunked_and_filters_tokens():
    requests = []

    def handler(request):
        chunk = json.loads(request.content)
        requests.append(chunk)
        return httpx.Response(200, json={"data": [{"status": "ok"} for _ in chunk]})

    tokens = [f"ExponentPushToken[{i}]" for i in range(150)] + ["not-a-token"]
    results = dispatcher_for(handler).send_push(tokens, PushMessage(title="Hi", body="There", data={"k": 1}))

    assert [len(c) for c in requests] == [100, 50]
    assert requests[0][0] == {
        "to": "ExponentPushToken[0]",
        "sound": "default",
        "title": "Hi",
        "body": "There",
        "data": {"k": 1},
        "priority": "default",
    }
    assert len(results) == 150


def test_push_without_valid_tokens_sends_nothing():
    def handler(request):
        raise AssertionError("no request expected")

    assert dispatcher_for(handler).send_push(["bogus"], PushMessage(title="Hi", body="There")) == []


def test_push_failures_are_swallowed():
    def handler(request):
        return httpx.Response(500, json={"errors": ["boom"]})

    results = dispatcher_for(handler).send_push(["ExponentPushToken[x]"], PushMessage(title="Hi", body="There"))

    assert len(results) == 1
    assert "error" in results[0]


def test_sms_posts_to_twilio():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={"sid": "SM1"})

    dispatcher = dispatcher_for(
        handler, twilio_account_sid="AC123", twilio_auth_token="secret", twilio_from_number="+15550000000"
    )

    assert dispatcher.send_sms("+15875550100", "Confirmed")

    [request] = seen
    assert request.url.path == "/2010-04-01/Accounts/AC123/Messages.json"
    assert request.headers["authorization"].startswith("Basic ")
    assert parse_qs(request.content.decode()) == {
        "To": ["+15875550100"],
        "From": ["+15550000000"],
        "Body": ["Confirmed"],
    }


def test_sms_without_config_or_number_is_skipped():
    def handler(request):
        raise AssertionError("no request expected")

    assert not dispatcher_for(handler).send_sms("+15875550100", "Confirmed")
    configured = dispatcher_for(
        handler, twilio_account_sid="AC123", twilio_auth_token="secret", twilio_from_number="+15550000000"
    )
    assert not configured.send_sms(None, "Confirmed")


def test_sms_failure_returns_false():
    def handler(request):
        return httpx.Response(400, json={"message": "bad number"})

    dispatcher = dispatcher_for(
        handler, twilio_account_sid="AC123", twilio_auth_token="secret", twilio_from_number="+15550000000"
    )
    assert not dispatcher.send_sms("+1", "Confirmed")
