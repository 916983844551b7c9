"""
Pytest fixtures for the Quest test suite.

- http_mocking: MockTransport-backed recording server and response builders
"""
