# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL business logic for the Korea travel weather
# advisor: the forecast-grid projection, the broadcast-time resolver, the
# category-code decoder, and the plain HTTP clients for the public tourism
# and weather APIs.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK, FastMCP, or any orchestration
#   framework. The projection, resolver and decoder import nothing but the
#   standard library and can run in a bare REPL with no network access.
# =============================================================================
