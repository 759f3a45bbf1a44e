"""Pytest configuration and shared fixtures."""

import os

# Settings are read at import time; pin them before any helpdesk module loads
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("AGENT_RR_KEY", "agent_rr_index")
os.environ.setdefault("LOG_LEVEL", "WARNING")
