"""HTTP endpoint for eventrelay.

A single-route FastAPI application that accepts JSON event payloads
and forwards them to the EventDispatcher.
"""
