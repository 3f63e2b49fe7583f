# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool wrappers.
#
# ARCHITECTURAL ROLE:
#   tools/ translates between the agent framework and core/.  Each tool:
#     1. Validates its arguments (coordinates, keywords)
#     2. Calls core/ functions and clients
#     3. Converts dataclasses to dicts and drops unreported fields
#     4. Caps list sizes so responses stay small
#
#   Tools hold no business logic and know nothing about Google ADK.
# =============================================================================
