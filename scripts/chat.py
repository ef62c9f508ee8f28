#!/usr/bin/env python3
"""Interactive chat CLI for kgchat."""

import asyncio
import os
import sys

import httpx

API_BASE = os.environ.get("KGCHAT_API", "http://localhost:8000")

HELP_TEXT = """
kgchat Interactive Chat
=======================

Commands:
  /graph           - Show the conversation tree
  /focus <id>      - Switch the active conversation
  /branch <text>   - Deep dive into <text> from the active conversation
  /explain <text>  - Quick one-sentence explanation of <text>
  /panel           - Show the branch open in the side panel
  /close           - Close the side panel
  /promote         - Switch to the side panel branch
  /history         - Show the active conversation
  /help            - Show this help
  /quit            - Exit

Just type your message to chat in the active conversation!
"""


class KGChat:
    def __init__(self):
        self.client = httpx.AsyncClient(base_url=API_BASE, timeout=120.0)

    async def close(self):
        await self.client.aclose()

    async def active_node_id(self) -> str:
        response = await self.client.get("/v1/session")
        response.raise_for_status()
        return response.json()["active_node_id"]

    async def chat(self, message: str) -> str:
        """Send a message to the active conversation and get the reply."""
        try:
            node_id = await self.active_node_id()
            response = await self.client.post(
                f"/v1/nodes/{node_id}/messages",
                json={"text": message},
            )
            if response.status_code == 409:
                return "Still waiting for the previous reply."
            response.raise_for_status()
            data = response.json()
            return f"\n{data['messages'][-1]['content']}\n"

        except httpx.HTTPError as e:
            return f"Error: {e}"

    async def graph(self) -> str:
        """Render the conversation tree as indented text."""
        try:
            response = await self.client.get("/v1/graph")
            response.raise_for_status()
            data = response.json()

            nodes = {n["id"]: n for n in data["nodes"]}
            children: dict[str, list[str]] = {}
            for edge in data["edges"]:
                children.setdefault(edge["from"], []).append(edge["to"])

            lines = [f"Conversation tree ({len(nodes)} nodes):"]

            def walk(node_id: str, depth: int) -> None:
                node = nodes[node_id]
                marker = "*" if node["active"] else " "
                loading = " (loading)" if node["loading"] else ""
                lines.append(
                    f" {marker} {'  ' * depth}{node['display_label']} [{node_id}] "
                    f"{node['message_count']} msgs{loading}"
                )
                for child_id in children.get(node_id, []):
                    walk(child_id, depth + 1)

            roots = [n["id"] for n in data["nodes"] if n["kind"] == "root"]
            for root_id in roots:
                walk(root_id, 0)

            return "\n".join(lines)

        except httpx.HTTPError as e:
            return f"Error: {e}"

    async def history(self, node_id: str | None = None) -> str:
        try:
            node_id = node_id or await self.active_node_id()
            response = await self.client.get(f"/v1/nodes/{node_id}/messages")
            response.raise_for_status()
            data = response.json()

            lines = [f"{data['label']} [{node_id}]"]
            for m in data["messages"]:
                speaker = "You" if m["role"] == "user" else "AI"
                lines.append(f"  {speaker}: {m['content']}")
            if data["loading"]:
                lines.append("  AI: ...")
            return "\n".join(lines)

        except httpx.HTTPError as e:
            return f"Error: {e}"

    async def branch(self, text: str) -> str:
        """Deep dive into highlighted text from the active conversation."""
        try:
            node_id = await self.active_node_id()
            response = await self.client.post(
                "/v1/branches",
                json={"parent_node_id": node_id, "selected_text": text},
            )
            response.raise_for_status()
            data = response.json()
            return (
                f"Branch {data['node']['id']} created: {data['initial_question']}\n"
                f"Use /panel to read it, /promote to switch to it."
            )

        except httpx.HTTPError as e:
            return f"Error: {e}"

    async def explain(self, term: str) -> str:
        try:
            response = await self.client.post("/v1/tooltips", json={"term": term})
            response.raise_for_status()
            data = response.json()
            source = "cached" if data["cached"] else "fresh"
            return f"{term}: {data['explanation']} [{source}]"

        except httpx.HTTPError as e:
            return f"Error: {e}"

    async def panel(self) -> str:
        try:
            response = await self.client.get("/v1/session")
            response.raise_for_status()
            side_panel = response.json()["side_panel"]
            if not side_panel:
                return "No side panel open."
            return await self.history(side_panel["node_id"])

        except httpx.HTTPError as e:
            return f"Error: {e}"

    async def session_action(self, path: str) -> str:
        try:
            response = await self.client.post(f"/v1/session/{path}")
            response.raise_for_status()
            data = response.json()
            return f"Active: {data['active_node_id']}"

        except httpx.HTTPError as e:
            return f"Error: {e}"

    async def focus(self, node_id: str) -> str:
        try:
            response = await self.client.post("/v1/session/focus", json={"node_id": node_id})
            if response.status_code == 404:
                return f"Unknown node: {node_id}"
            response.raise_for_status()
            return f"Active: {response.json()['active_node_id']}"

        except httpx.HTTPError as e:
            return f"Error: {e}"


async def main():
    print(HELP_TEXT)

    chat = KGChat()

    # Check connection
    try:
        await chat.client.get("/health")
        print("Connected to kgchat API at", API_BASE)
    except httpx.HTTPError:
        print(f"Error: Cannot connect to kgchat API at {API_BASE}")
        print("Make sure the API is running: python -m kgchat.api.main")
        return

    print("-" * 50)

    try:
        while True:
            try:
                user_input = input("\nYou: ").strip()
            except EOFError:
                break

            if not user_input:
                continue

            command, _, argument = user_input.partition(" ")
            command = command.lower()
            argument = argument.strip()

            # Handle commands
            if command in ["/quit", "/exit", "/q"]:
                print("Goodbye!")
                break

            elif command == "/help":
                print(HELP_TEXT)

            elif command == "/graph":
                print(f"\n{await chat.graph()}")

            elif command == "/history":
                print(f"\n{await chat.history()}")

            elif command == "/focus" and argument:
                print(f"\n{await chat.focus(argument)}")

            elif command == "/branch" and argument:
                print(f"\n{await chat.branch(argument)}")

            elif command == "/explain" and argument:
                print(f"\n{await chat.explain(argument)}")

            elif command == "/panel":
                print(f"\n{await chat.panel()}")

            elif command == "/close":
                print(f"\n{await chat.session_action('side-panel/close')}")

            elif command == "/promote":
                print(f"\n{await chat.session_action('side-panel/promote')}")

            elif user_input.startswith("/"):
                print("Unknown command. Type /help for available commands.")

            else:
                # Regular chat
                print("\nAI: ", end="", flush=True)
                result = await chat.chat(user_input)
                print(result)

    finally:
        await chat.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nGoodbye!")
        sys.exit(0)
