"""Realtime infrastructure (Socket.IO, presence).

One socket server is shared by team chat, notification pushes and typing
indicators.
"""
