"""Stream a completion and print tool call previews as they build up.

Requires OPENAI_API_KEY in the environment.
"""

import asyncio
import logging

from nativecall import (
    CustomToolRegistry,
    NativeToolCallParser,
    TextDeltaEvent,
    ToolCallFailedEvent,
    ToolCallPreviewEvent,
    ToolCallReadyEvent,
    ToolCatalog,
)
from nativecall.provider import OpenAIProvider

logging.basicConfig(level=logging.INFO)

TOOLS = [
    {
        "type": "function",
        "function": {
            "name": "browser_navigate",
            "description": "Navigate the browser to a URL.",
            "parameters": {
                "type": "object",
                "properties": {"url": {"type": "string"}},
                "required": ["url"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "deploy_site",
            "description": "Deploy the current project.",
            "parameters": {
                "type": "object",
                "properties": {"target": {"type": "string"}},
            },
        },
    },
]


async def main():
    custom_tools = CustomToolRegistry(["deploy_site"])
    parser = NativeToolCallParser(ToolCatalog(is_custom_tool=custom_tools.has))
    provider = OpenAIProvider()

    async for event in provider.stream_tool_calls(
        model="gpt-4o-mini",
        messages=[{"role": "user", "content": "Open example.com, then deploy to staging."}],
        tools=TOOLS,
        parser=parser,
    ):
        if isinstance(event, TextDeltaEvent):
            print(event.content, end="", flush=True)
        elif isinstance(event, ToolCallPreviewEvent):
            print(f"\n[preview] {event.invocation.name} {event.invocation.raw_params}")
        elif isinstance(event, ToolCallReadyEvent):
            print(f"\n[ready] {event.invocation.model_dump_json()}")
        elif isinstance(event, ToolCallFailedEvent):
            print(f"\n[failed] {event.name}: {event.error}")


if __name__ == "__main__":
    asyncio.run(main())
