"""Fuzzy and exact matching with ranked scoring, ANSI colour extraction, chunked item storage and query history."""

__version__ = "0.61.0"