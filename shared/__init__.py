"""
readpe Shared Module
====================

Configuration, structured logging, and console utilities shared by the
readpe tool package.
"""

from shared.config import GlobalConfig, ReadpeConfig, ReadpeSettings

__all__ = ["GlobalConfig", "ReadpeConfig", "ReadpeSettings"]
