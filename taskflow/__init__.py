"""Taskflow - task tracking with a drag-and-drop kanban board.

This package provides:
- Database models for users, tasks and comments
- Repository functions for tasks and users
- The kanban board state manager (``taskflow.board``)
- Streamlit page helpers for theme and shared widgets
"""
