"""Learnstage - content-managed learning site server and static builder."""

__version__ = "0.1.0"
