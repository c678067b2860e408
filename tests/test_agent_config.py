from __future__ import annotations

from datetime import datetime

import pytest

from toolkit_dev.agent.config import (
    SimpleTool,
    SimpleToolkit,
    create_agent_config,
    create_core_agent_config,
    default_base_system_prompt,
)
from toolkit_dev.errors import ToolkitDefinitionError, ToolkitParameterError, UnknownToolkitError
from toolkit_dev.tools.usage import InMemoryUsageRecorder
from toolkit_dev.toolkits.credentials import InMemoryAccountStore
from toolkit_dev.toolkits.types import SelectedToolkit, ToolkitContext, Toolkits

BASE = "BASE PROMPT"


async def _noop(args):
    return {"ok": True}


def _tool(name: str) -> SimpleTool:
    return SimpleTool(name=name, description=f"{name} tool", parameters={"type": "object"}, execute=_noop)


def _toolkit(tk_id: str, prompt: str, *names: str) -> SimpleToolkit:
    return SimpleToolkit(id=tk_id, system_prompt=prompt, tools=[_tool(n) for n in names])


class TestCoreAgentConfig:
    """Namespacing and prompt assembly."""

    def test_tool_count_is_sum_and_keys_are_prefixed(self) -> None:
        toolkits = [
            _toolkit("github", "gh", "search-repos", "get-org"),
            _toolkit("spotify", "sp", "get-playlists"),
            _toolkit("twitter", "tw", "search-tweets", "get-user", "get-tweet"),
        ]
        config = create_core_agent_config(toolkits, "openai/gpt-4", base_system_prompt=BASE)

        assert len(config.tools) == 6
        for tk in toolkits:
            for tool in tk.tools:
                assert f"{tk.id}_{tool.name}" in config.tools

    def test_same_tool_name_in_two_toolkits_does_not_collide(self) -> None:
        config = create_core_agent_config(
            [_toolkit("a", "A", "search"), _toolkit("b", "B", "search")],
            "m",
            base_system_prompt=BASE,
        )
        assert list(config.tools) == ["a_search", "b_search"]

    def test_prompt_layout(self) -> None:
        config = create_core_agent_config(
            [_toolkit("a", "Fragment A", "x"), _toolkit("b", "Fragment B", "y")],
            "m",
            system_prompt="Be brief.",
            base_system_prompt=BASE,
        )
        assert config.system_prompt == (
            "BASE PROMPT\n\n## Available Toolkits\n\n"
            "You have access to the following toolkits and their capabilities:\n\n"
            "Fragment A\n\n---\n\nFragment B\n\nBe brief."
        )

    def test_swapping_toolkits_swaps_only_fragments(self) -> None:
        a = _toolkit("a", "Fragment A", "x")
        b = _toolkit("b", "Fragment B", "y")
        ab = create_core_agent_config([a, b], "m", base_system_prompt=BASE).system_prompt
        ba = create_core_agent_config([b, a], "m", base_system_prompt=BASE).system_prompt

        assert ab.replace("Fragment A", "@").replace("Fragment B", "Fragment A").replace("@", "Fragment B") == ba
        assert ab.index("Fragment A") < ab.index("Fragment B")
        assert ba.index("Fragment B") < ba.index("Fragment A")

    def test_empty_toolkit_list_yields_base_prompt_verbatim(self) -> None:
        config = create_core_agent_config([], "m", system_prompt="ignored", base_system_prompt=BASE)
        assert config.system_prompt == BASE
        assert config.tools == {}

    def test_zero_tool_toolkit_still_contributes_fragment(self) -> None:
        config = create_core_agent_config([_toolkit("empty", "Only words")], "m", base_system_prompt=BASE)
        assert config.tools == {}
        assert "Only words" in config.system_prompt

    def test_defaults(self) -> None:
        config = create_core_agent_config([], "openai/gpt-4", base_system_prompt=BASE)
        assert config.max_steps == 15
        assert config.tool_call_streaming is True
        assert config.use_native_search is False
        assert config.generate_message_id() != config.generate_message_id()

    def test_duplicate_toolkit_is_rejected(self) -> None:
        tk = _toolkit("a", "A", "search")
        with pytest.raises(ToolkitDefinitionError, match="a_search"):
            create_core_agent_config([tk, tk], "m", base_system_prompt=BASE)

    def test_tool_definitions_follow_registration_order(self) -> None:
        config = create_core_agent_config(
            [_toolkit("b", "B", "one"), _toolkit("a", "A", "two")], "m", base_system_prompt=BASE
        )
        names = [d["function"]["name"] for d in config.tool_definitions()]
        assert names == ["b_one", "a_two"]

    def test_default_base_prompt_mentions_time_and_code_fences(self) -> None:
        prompt = default_base_system_prompt(datetime(2024, 3, 5, 14, 7, 9))
        assert "03/05/2024, 02:07:09 PM" in prompt
        assert prompt.endswith("you must include a language with ```")


class TestCreateAgentConfig:
    """Registry-backed resolution."""

    @pytest.mark.asyncio
    async def test_resolves_registry_toolkits(self, accounts) -> None:
        ctx = ToolkitContext(accounts=accounts)
        config = await create_agent_config(
            [{"id": "github", "parameters": {}}, SelectedToolkit(id=Toolkits.Spotify)],
            "openai/gpt-4",
            base_system_prompt=BASE,
            context=ctx,
        )
        assert list(config.tools) == [
            "github_search-repos",
            "github_get-user-data",
            "github_get-org",
            "spotify_get-playlists",
        ]
        assert "Spotify playlists" in config.system_prompt

    @pytest.mark.asyncio
    async def test_missing_credential_yields_failing_stubs(self) -> None:
        ctx = ToolkitContext(accounts=InMemoryAccountStore())
        config = await create_agent_config(
            [{"id": "spotify"}], "m", base_system_prompt=BASE, context=ctx
        )
        tool = config.tools["spotify_get-playlists"]
        payload = await tool.execute({})

        assert payload["success"] is False
        assert payload["error"] == "MISSING_CREDENTIAL"
        assert "No Spotify account found" in payload["message"]

    @pytest.mark.asyncio
    async def test_unknown_toolkit_raises(self, accounts) -> None:
        with pytest.raises((UnknownToolkitError, ValueError)):
            await create_agent_config(
                [{"id": "nope"}], "m", context=ToolkitContext(accounts=accounts)
            )

    @pytest.mark.asyncio
    async def test_invalid_parameters_raise(self, accounts) -> None:
        ctx = ToolkitContext(accounts=accounts)
        with pytest.raises(ToolkitParameterError):
            await create_agent_config(
                [{"id": "image", "parameters": {"model": "acme:paint"}}], "m", context=ctx
            )

    @pytest.mark.asyncio
    async def test_dispatch_records_usage_and_attaches_message(self, accounts) -> None:
        from toolkit_dev.artifacts.documents import DocumentStore

        store = DocumentStore()
        recorder = InMemoryUsageRecorder()
        ctx = ToolkitContext(accounts=accounts, documents=store, chat_id="chat-1")
        config = await create_agent_config(
            [{"id": "artifacts"}], "m", base_system_prompt=BASE, context=ctx, recorder=recorder
        )

        payload = await config.tools["artifacts_create-artifact"].execute(
            {"title": "Plan", "kind": "text", "content": "Step one."}
        )

        assert payload["success"] is True
        assert payload["result"]["title"] == "Plan"
        assert payload["message"].startswith("I've created a text artifact titled \"Plan\"")
        assert recorder.count("artifacts", "create-artifact") == 1
        assert [d.title for d in store.list_for_chat("chat-1")] == ["Plan"]
