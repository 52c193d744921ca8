"""
CLI Client Module.

Command-line client for the pimd control socket.

Architecture:
- CLI is a thin presentation layer
- All routing state lives in the daemon
- Commands resolve to an operation code sent over a Unix socket
- Reply lines are printed as they arrive

Usage:
    pimctl --help
    pimctl show pim routes
    pimctl -d show igmp groups
"""
