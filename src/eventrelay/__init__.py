"""eventrelay -- debounced event-to-command relay.

Listens for JSON event notifications over HTTP (currently hostapd
wireless client connect/disconnect events) and runs a shell command
for each one that makes it through the per-client debounce window
and the optional allow-list.
"""

__version__ = "0.1.0"
