#!/usr/bin/env python3
"""
MCP Server wrapper for Mandalart tools.

Exposes goal interviews, grid generation and history management via MCP.
"""
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from fastmcp import FastMCP

from mandalart import mcp_server as tools
from mandalart.config import env_flag
from mandalart.logging import setup_logging

# Create MCP server
mcp = FastMCP("mandalart")


@mcp.tool()
def ask_questions(goal: str) -> dict:
    """Get three interview questions that sharpen a goal before planning."""
    return tools.ask_questions(goal)

@mcp.tool()
def create_mandalart(goal: str, questions: list[str], answers: list[str], email: str = "") -> dict:
    """Generate and save a 9x9 Mandalart: 8 sub-goals with 8 tasks each.

    Pass the question texts from ask_questions and the answers in the same order.
    """
    return tools.create_mandalart(goal, answers, questions, email or None)

@mcp.tool()
def list_mandalarts(email: str = "") -> dict:
    """List saved Mandalarts for a user, newest first."""
    return tools.list_mandalarts(email or None)

@mcp.tool()
def get_mandalart(history_id: str, email: str = "") -> dict:
    """Get a saved Mandalart including every task checklist."""
    return tools.get_mandalart(history_id, email or None)

@mcp.tool()
def toggle_checklist_item(history_id: str, sub_goal: int, task: int, item_id: str, email: str = "") -> dict:
    """Check or uncheck a checklist item. sub_goal and task are 0-7."""
    return tools.toggle_checklist_item(history_id, sub_goal, task, item_id, email or None)

@mcp.tool()
def delete_mandalart(history_id: str, email: str = "") -> dict:
    """Delete a saved Mandalart."""
    return tools.delete_mandalart(history_id, email or None)


if __name__ == "__main__":
    setup_logging(logging.DEBUG if env_flag("MANDALART_DEBUG") else logging.INFO)
    mcp.run()
