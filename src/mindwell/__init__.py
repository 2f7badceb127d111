"""MindWell backend: the HTTP surface of the authentication subsystem."""
