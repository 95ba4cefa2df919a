# ruff: noqa: F403, F401
"""Schemas package initialization."""

from .admin import *
from .base import *
from .chat import *
