from __future__ import annotations

import pytest

from fakes import FakeModelClient
from toolkit_dev.artifacts import (
    DocumentNotFoundError,
    DocumentStore,
    ListDataStream,
    accumulate_deltas,
    get_document_handler,
)
from toolkit_dev.artifacts.code import detect_language


async def _aiter(items):
    for item in items:
        yield item


class TestAccumulateDeltas:
    @pytest.mark.asyncio
    async def test_forwards_each_delta_in_order(self) -> None:
        stream = ListDataStream()
        content = await accumulate_deltas(_aiter(["Hel", "lo"]), stream)

        assert content == "Hello"
        assert stream.parts == [
            {"type": "content-update", "content": "Hel"},
            {"type": "content-update", "content": "lo"},
        ]

    @pytest.mark.asyncio
    async def test_stream_error_propagates_after_forwarded_parts(self) -> None:
        async def failing():
            yield "partial"
            raise RuntimeError("stream dropped")

        stream = ListDataStream()
        with pytest.raises(RuntimeError, match="stream dropped"):
            await accumulate_deltas(failing(), stream)
        assert stream.parts == [{"type": "content-update", "content": "partial"}]


class TestDocumentHandlers:
    @pytest.mark.asyncio
    async def test_text_update_passes_current_content_as_prediction(self) -> None:
        store = DocumentStore()
        doc = store.create("Essay", "text", content="Old text")
        model = FakeModelClient(deltas=["Hel", "lo"])
        stream = ListDataStream()

        content = await get_document_handler("text").update(doc, "Rewrite it", stream, model)

        assert content == "Hello"
        assert len(stream.of_type("content-update")) == 2
        assert model.stream_calls[0]["prediction"] == "Old text"
        assert model.stream_calls[0]["prompt"] == "Rewrite it"
        assert "Old text" in model.stream_calls[0]["system"]

    @pytest.mark.asyncio
    async def test_code_create_emits_language_once_before_content(self) -> None:
        model = FakeModelClient(deltas=["// Language: Python 3\n", "def main():\n", "    print('hi')\n"])
        stream = ListDataStream()

        content = await get_document_handler("code").create("hello script", stream, model)

        assert content.startswith("// Language: Python")
        assert [p["type"] for p in stream.parts] == [
            "language-update",
            "content-update",
            "content-update",
            "content-update",
        ]
        assert stream.parts[0]["content"] == "python"

    @pytest.mark.asyncio
    async def test_code_language_waits_for_enough_text(self) -> None:
        model = FakeModelClient(deltas=["def f():", " return 1 + 2 + 3 + 4"])
        stream = ListDataStream()

        await get_document_handler("code").create("adder", stream, model)

        assert [p["type"] for p in stream.parts] == ["content-update", "language-update", "content-update"]

    @pytest.mark.asyncio
    async def test_custom_reports_word_count(self) -> None:
        model = FakeModelClient(deltas=["one two ", "three"])
        stream = ListDataStream()

        await get_document_handler("custom").create("list", stream, model)

        assert stream.parts[-1] == {"type": "info-update", "content": "Custom artifact created with 3 words"}

    @pytest.mark.asyncio
    async def test_handler_error_propagates(self) -> None:
        model = FakeModelClient(deltas=["a"], error=RuntimeError("model failed"))
        with pytest.raises(RuntimeError, match="model failed"):
            await get_document_handler("text").create("t", ListDataStream(), model)

    def test_unknown_kind(self) -> None:
        with pytest.raises(KeyError):
            get_document_handler("sheet")


class TestDetectLanguage:
    @pytest.mark.parametrize(
        "code, expected",
        [
            ("// language: rust\nfn main() {}", "rust"),
            ("import os\nprint(os.name)", "python"),
            ("const x = 1; console.log(x)", "javascript"),
            ("<html><body></body></html>", "html"),
            # "<!doctype" contains "type ", which is checked before html
            ("<!DOCTYPE html><html></html>", "typescript"),
            ('{"a": 1}', "json"),
            ("hello world", None),
        ],
    )
    def test_detection(self, code, expected) -> None:
        assert detect_language(code) == expected


class TestDocumentStore:
    def test_create_get_update(self) -> None:
        store = DocumentStore()
        doc = store.create("Notes", "text", chat_id="c1")
        store.update_content(doc.id, "body")

        assert store.get(doc.id).content == "body"
        assert store.get(doc.id).to_dict()["chatId"] == "c1"

    def test_unknown_kind_and_id(self) -> None:
        store = DocumentStore()
        with pytest.raises(ValueError):
            store.create("x", "sheet")
        with pytest.raises(DocumentNotFoundError):
            store.get("missing")
