"""
test_system.py

Tests for host information helpers.
"""

import platform

from toolkits import Sys


class TestSys:

    def test_matches_platform(self):
        assert Sys.arch() == platform.machine()
        assert Sys.os() == platform.system()
        assert Sys.hostname() == platform.node()

    def test_returns_strings(self):
        assert all(isinstance(value, str) for value in (Sys.arch(), Sys.os(), Sys.hostname()))
