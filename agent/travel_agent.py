# =============================================================================
# agent/travel_agent.py  -  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the ADK agent: the coordinator that receives user questions,
#   calls the MCP tools in tools/mcp_server.py, and writes the answer.
#
#   ADK  = orchestration (tool calling, sessions)
#   LLM  = reasoning, any provider through LiteLlm
#   MCP  = the connection to the tool server
#
#         ADK Agent ──LiteLlm──▶ model
#             │
#             └──stdio MCP──▶ FastMCP server (tools/mcp_server.py)
#                                   │
#                                   ▼
#                             core/ (pure Python + API clients)
#
# MODEL:
#   AGENT_MODEL picks the LiteLlm model string; the default routes GPT-4o
#   through OpenRouter and needs OPENROUTER_API_KEY.
# =============================================================================

import os
import sys

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_travel_advisor_prompt

DEFAULT_MODEL = "openrouter/openai/gpt-4o"


def create_agent() -> Agent:
    """Create the Korea travel weather agent.

    The MCP server is started as a subprocess with the same interpreter, from
    the project root, so it imports core/ exactly like the caller does.  The
    subprocess inherits the environment (service key, live/mock toggle).
    """
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    mcp_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command=sys.executable,
            args=["-m", "tools.mcp_server"],
            cwd=project_root,
            env=dict(os.environ),
        ),
    )

    return Agent(
        name="korea_travel_weather_advisor",
        model=LiteLlm(model=os.environ.get("AGENT_MODEL", DEFAULT_MODEL)),
        instruction=get_travel_advisor_prompt(),
        tools=[mcp_tools],
    )
