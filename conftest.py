"""Pytest configuration for propkit."""


def pytest_configure(config):
    """Configure pytest with custom settings."""
    config.addinivalue_line("markers", "paranoid: mark test as soft delete test")
