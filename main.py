# =============================================================================
# main.py  -  Entry Point for the Korea Travel Weather Agent
# =============================================================================
#
# HOW TO RUN:
#   python main.py
#
# WHAT HAPPENS:
#   1. Loads .env (OPENROUTER_API_KEY, DATA_GO_KR_SERVICE_KEY, USE_LIVE_DATA)
#   2. Creates the ADK agent (agent/travel_agent.py), which spawns the MCP
#      tool server as a subprocess
#   3. Reads questions from the terminal and streams each one through the
#      agent, printing tool calls as they happen and the final answer
#
# GOOGLE ADK CONCEPTS USED:
#   - Runner: drives the agent's execution lifecycle
#   - InMemorySessionService: conversation state for this process only
#   - Content/Part: ADK's message format
# =============================================================================

import asyncio

from dotenv import load_dotenv

# Must run before the agent is created: LiteLlm and the MCP subprocess both
# read their keys from the environment.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.travel_agent import create_agent

APP_NAME = "korea_travel_weather"
USER_ID = "demo_user"


async def run_agent():
    """Run the agent interactively until the user quits."""
    print("=" * 70)
    print("  KOREA TRAVEL WEATHER AGENT")
    print("  Powered by Google ADK + FastMCP")
    print("=" * 70)
    print("\n🔧 Initializing agent...")
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(
        agent=agent,
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(
        app_name=APP_NAME,
        user_id=USER_ID,
    )

    print("✅ Agent initialized and ready!\n")
    print("💬 Ask about destinations, festivals, stays or the weather in Korea.")
    print("   (Type 'quit' to exit)\n")
    print("-" * 70)

    while True:
        try:
            user_input = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\n👋 Goodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue

        user_message = types.Content(
            role="user",
            parts=[types.Part(text=user_input)],
        )

        print("\n🤖 Agent is thinking...\n")
        print("-" * 70)

        # Events stream in as the agent reasons: text parts, tool calls and
        # tool results.  The last text part is the answer.
        final_response = ""

        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if getattr(part, "text", None):
                        final_response = part.text

                    if getattr(part, "function_call", None):
                        print(f"  🔧 Calling tool: {part.function_call.name}")

        print("-" * 70)
        if final_response:
            print(f"\n🤖 Agent:\n\n{final_response}")
        else:
            print("\n⚠️  No response generated. The agent may have encountered an error.")

        print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_agent())
