"""Test suite for statsview.

Unit tests live under unit/, grouped by area (cache, sessions, codec,
websocket, limits, errors, infra), with fakes for every port in helpers/.
live.py is a manual client for a running server.
"""
