# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent configuration.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer orchestrates.  It:
#     1. Receives the user's question ("What's the weather at Haeundae?")
#     2. Works out which places, dates and kinds of listing are involved
#     3. Calls tools (via MCP) to look them up
#     4. Answers in plain language
#
#   It holds no projection, time or decoding logic (that's core/) and no
#   tool implementations (that's tools/).
# =============================================================================
