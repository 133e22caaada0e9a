"""Default outbound transport and AI generator, with their network faked."""

from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from tarotbot.ai import AIError, OpenAIChatGenerator
from tarotbot.transport import WhatsAppTransport


def make_transport(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return WhatsAppTransport(phone_number_id="1055", access_token="token", client=client)


class TestWhatsAppTransport:
    def test_send_posts_text_message(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = request.read()
            return httpx.Response(200, json={"messages": [{"id": "wamid.42"}]})

        result = make_transport(handler).send("5511999990000", "hello")
        assert result.ok
        assert result.value == "wamid.42"
        assert seen["url"] == "https://graph.facebook.com/v16.0/1055/messages"
        assert seen["auth"] == "Bearer token"
        assert b'"messaging_product":"whatsapp"' in seen["body"].replace(b" ", b"")

    def test_rejected_send_is_a_failure_result(self):
        result = make_transport(lambda request: httpx.Response(400, json={"error": "bad"})).send("1", "x")
        assert not result.ok
        assert result.error_code == "delivery_error"
        assert "400" in result.error

    def test_network_error_is_a_failure_result(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = make_transport(handler).send("1", "x")
        assert not result.ok
        assert result.error_code == "delivery_error"

    def test_missing_token(self):
        result = WhatsAppTransport(phone_number_id="1", access_token="").send("1", "x")
        assert not result.ok


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


class TestOpenAIChatGenerator:
    def test_generate_returns_stripped_content(self):
        completions = FakeCompletions(content="  The Star brings hope.\n\nTrust it.  ")
        gen = OpenAIChatGenerator(api_key="k", model="gpt-test", client=fake_client(completions))
        messages = [{"role": "user", "content": "hi"}]

        assert gen.generate(messages) == "The Star brings hope.\n\nTrust it."
        assert completions.kwargs["model"] == "gpt-test"
        assert completions.kwargs["messages"] == messages

    def test_api_error_becomes_ai_error(self):
        error = APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
        gen = OpenAIChatGenerator(api_key="k", client=fake_client(FakeCompletions(error=error)))
        with pytest.raises(AIError):
            gen.generate([{"role": "user", "content": "hi"}])

    def test_empty_reply_is_an_error(self):
        gen = OpenAIChatGenerator(api_key="k", client=fake_client(FakeCompletions(content="")))
        with pytest.raises(AIError):
            gen.generate([{"role": "user", "content": "hi"}])

    def test_missing_api_key(self):
        with pytest.raises(AIError, match="OPENAI_API_KEY"):
            OpenAIChatGenerator(api_key=None).generate([{"role": "user", "content": "hi"}])


class TestWhatsAppResponseBodies:
    @pytest.mark.parametrize("body", [[{"id": "x"}], "accepted", 7, {"messages": "wamid"}, {"messages": ["wamid"]}])
    def test_unexpected_success_body_still_succeeds(self, body):
        result = make_transport(lambda request: httpx.Response(200, json=body)).send("1", "x")
        assert result.ok
        assert result.value == ""

    def test_non_json_success_body(self):
        result = make_transport(lambda request: httpx.Response(200, text="ok")).send("1", "x")
        assert result.ok
        assert result.value == ""
