"""Test suite for llama-relay.

Unit tests live under ``unit/<domain>/`` and use plain module names; the
root ``conftest.py`` collects them. Shared fakes (WebSockets, upstream
transports, apps) are in the ``helpers/`` subpackage.
"""
