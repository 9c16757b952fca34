"""
バックエンドアダプターのテスト

httpx.MockTransport で送信内容を記録し、各プロトコルの
URL・リクエストボディ・エラー伝播を検証する。
"""

import json

import httpx
import openai
import pytest

from bench_gauge_core.domain.value_objects import BackendConfig, UnsupportedServerTypeError
from bench_gauge_core.infrastructure.backends.base import normalize_base_url
from bench_gauge_core.infrastructure.backends.factory import create_adapter
from bench_gauge_core.infrastructure.backends.native import NativeAdapter
from bench_gauge_core.infrastructure.backends.openai_style import OpenAIStyleAdapter
from bench_gauge_core.task_catalog import DEFAULT_TOOLS

CHAT_REPLY = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "created": 0,
    "model": "qwen2.5-7b",
    "choices": [{"index": 0, "message": {"role": "assistant", "content": "Paris"}, "finish_reason": "stop"}],
}


def _recording_client(body=None, status_code=200, text=None):
    """リクエストを記録するhttpxクライアントを返す"""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if text is not None:
            return httpx.Response(status_code, text=text)
        return httpx.Response(status_code, json=body if body is not None else CHAT_REPLY)

    return httpx.Client(transport=httpx.MockTransport(handler)), requests


class TestNormalizeBaseUrl:
    """normalize_base_url() のテスト"""

    def test_adds_scheme(self):
        assert normalize_base_url("localhost:1234") == "http://localhost:1234"

    def test_keeps_https(self):
        assert normalize_base_url("https://llm.example.com") == "https://llm.example.com"

    def test_strips_trailing_slashes(self):
        assert normalize_base_url("http://localhost:1234///") == "http://localhost:1234"


class TestOpenAIStyleAdapter:
    """OpenAIStyleAdapter のテスト"""

    def test_posts_to_v1_chat_completions(self):
        """/v1 を含まないURLには /v1/chat/completions を付与する"""
        client, requests = _recording_client()
        adapter = OpenAIStyleAdapter("localhost:1234", "qwen2.5-7b", http_client=client)

        reply = adapter.send("What is the capital of France?")

        assert reply == CHAT_REPLY
        assert str(requests[0].url) == "http://localhost:1234/v1/chat/completions"

    def test_base_with_v1_uses_chat_completions(self):
        """/v1 を含むURLには /chat/completions のみを付与する"""
        client, requests = _recording_client()
        adapter = OpenAIStyleAdapter("http://localhost:1234/v1/", "m", http_client=client)

        adapter.send("hi")

        assert str(requests[0].url) == "http://localhost:1234/v1/chat/completions"

    def test_body_without_tools(self):
        """ツールなしの場合、tools と tool_choice を送らない"""
        client, requests = _recording_client()
        adapter = OpenAIStyleAdapter("localhost:1234", "m", temperature=0.2, max_tokens=64, http_client=client)

        adapter.send("hello")

        body = json.loads(requests[0].content)
        assert body["model"] == "m"
        assert body["messages"] == [{"role": "user", "content": "hello"}]
        assert body["temperature"] == 0.2
        assert body["max_tokens"] == 64
        assert "tools" not in body
        assert "tool_choice" not in body

    def test_body_with_tools(self):
        """ツールありの場合、tools と tool_choice=auto を送る"""
        client, requests = _recording_client()
        adapter = OpenAIStyleAdapter("localhost:1234", "m", http_client=client)

        adapter.send("weather?", tools=list(DEFAULT_TOOLS))

        body = json.loads(requests[0].content)
        assert body["tool_choice"] == "auto"
        assert [t["function"]["name"] for t in body["tools"]] == ["get_weather", "calculator", "search"]
        assert body["tools"][0]["type"] == "function"

    def test_non_standard_body_returned_unmodified(self):
        """レスポンスボディはそのまま返す"""
        client, _ = _recording_client(body={"generated_text": "hi"})
        adapter = OpenAIStyleAdapter("localhost:1234", "m", http_client=client)

        assert adapter.send("hi") == {"generated_text": "hi"}

    def test_http_error_propagates_without_retry(self):
        """HTTPエラーはリトライせずに例外として伝播する"""
        client, requests = _recording_client(body={"error": "boom"}, status_code=500)
        adapter = OpenAIStyleAdapter("localhost:1234", "m", http_client=client)

        with pytest.raises(openai.APIStatusError):
            adapter.send("hi")

        assert len(requests) == 1

    def test_close_leaves_injected_client_open(self):
        """注入されたクライアントは close() で閉じない"""
        client, _ = _recording_client()
        adapter = OpenAIStyleAdapter("localhost:1234", "m", http_client=client)

        adapter.close()

        assert client.is_closed is False

    def test_close_releases_owned_client(self):
        """自前で作成したクライアントは close() で閉じる"""
        adapter = OpenAIStyleAdapter("localhost:1234", "m")

        adapter.close()

        assert adapter.client.is_closed() is True


class TestNativeAdapter:
    """NativeAdapter のテスト"""

    def test_generate_without_tools(self):
        """ツールなしの場合、/api/generate にフラットな prompt を送る"""
        client, requests = _recording_client(body={"response": "Paris", "done": True})
        adapter = NativeAdapter("localhost:11434", "llama3", temperature=0.5, max_tokens=128, http_client=client)

        reply = adapter.send("capital?")

        assert reply == {"response": "Paris", "done": True}
        assert str(requests[0].url) == "http://localhost:11434/api/generate"
        assert json.loads(requests[0].content) == {
            "model": "llama3",
            "prompt": "capital?",
            "temperature": 0.5,
            "num_predict": 128,
        }

    def test_chat_with_tools(self):
        """ツールありの場合、/api/chat に messages と tools を送る"""
        client, requests = _recording_client(body={"message": {"role": "assistant", "content": ""}})
        adapter = NativeAdapter("http://localhost:11434/", "llama3", http_client=client)

        adapter.send("weather?", tools=list(DEFAULT_TOOLS[:1]))

        assert str(requests[0].url) == "http://localhost:11434/api/chat"
        assert json.loads(requests[0].content) == {
            "model": "llama3",
            "messages": [{"role": "user", "content": "weather?"}],
            "temperature": 0.7,
            "num_predict": 256,
            "tools": [DEFAULT_TOOLS[0].to_dict()],
            "stream": False,
        }

    def test_streamed_generate_body_is_folded(self):
        """改行区切りのストリーミングボディは1つの応答に結合する"""
        ndjson = "\n".join([
            json.dumps({"response": "Par", "done": False}),
            json.dumps({"response": "is", "done": False}),
            json.dumps({"response": "", "done": True, "eval_count": 2}),
        ])
        client, _ = _recording_client(text=ndjson)
        adapter = NativeAdapter("localhost:11434", "llama3", http_client=client)

        reply = adapter.send("capital?")

        assert reply["response"] == "Paris"
        assert reply["done"] is True
        assert reply["eval_count"] == 2

    def test_http_error_propagates(self):
        """HTTPエラーは httpx.HTTPStatusError として伝播する"""
        client, _ = _recording_client(body={"error": "model not found"}, status_code=404)
        adapter = NativeAdapter("localhost:11434", "missing", http_client=client)

        with pytest.raises(httpx.HTTPStatusError):
            adapter.send("hi")

    def test_close_leaves_injected_client_open(self):
        """注入されたクライアントは close() で閉じない"""
        client, _ = _recording_client(body={"response": "ok"})
        adapter = NativeAdapter("localhost:11434", "llama3", http_client=client)

        adapter.close()

        assert client.is_closed is False

    def test_close_releases_owned_client(self):
        """自前で作成したクライアントは close() で閉じる"""
        adapter = NativeAdapter("localhost:11434", "llama3")

        adapter.close()

        assert adapter.client.is_closed is True


class TestCreateAdapter:
    """create_adapter() ファクトリのテスト"""

    def test_openai_style(self):
        adapter = create_adapter(BackendConfig(server_type="openai-style"))
        assert isinstance(adapter, OpenAIStyleAdapter)

    def test_native(self):
        adapter = create_adapter(BackendConfig(server_type="native", base_url="localhost:11434"))
        assert isinstance(adapter, NativeAdapter)

    def test_legacy_aliases(self):
        """lmStudio / ollama の別名も受け付ける"""
        assert isinstance(create_adapter(BackendConfig(server_type="lmStudio")), OpenAIStyleAdapter)
        assert isinstance(create_adapter(BackendConfig(server_type="ollama")), NativeAdapter)

    def test_unsupported_server_type_raises(self):
        with pytest.raises(UnsupportedServerTypeError, match="Unsupported server type: vllm"):
            create_adapter(BackendConfig(server_type="vllm"))

    def test_config_values_passed_through(self):
        client, _ = _recording_client()
        config = BackendConfig(server_type="native", model="llama3", temperature=0.1, max_tokens=32)

        adapter = create_adapter(config, http_client=client, timeout_seconds=5)

        assert adapter.model == "llama3"
        assert adapter.temperature == 0.1
        assert adapter.max_tokens == 32
        assert adapter.timeout_seconds == 5
        assert adapter.client is client
