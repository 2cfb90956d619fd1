"""Lobby/result screenshot OCR -> per-slot BGMI match sheet."""

from .classify import classify_text, group_texts
from .lobby import parse_lobby
from .reconcile import cross_reference
from .result import parse_result
from .output import serialize

__version__ = "0.1.0"
