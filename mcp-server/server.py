#!/usr/bin/env python3
"""MCP Server for the FIRE Planner.

This server exposes FIRE planning calculations as MCP tools,
allowing AI assistants to answer questions about a user's financial plan.
"""

import os
import sys
import json
import asyncio
import logging
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiProfileTools


# Create the MCP server
server = Server("fire-planner")

# Global tools instance (initialized on startup)
tools: MultiProfileTools | None = None


def get_tools() -> MultiProfileTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default profile can be set via FIRE_PLANNER_PROFILE env var
        default_profile = os.environ.get('FIRE_PLANNER_PROFILE')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = MultiProfileTools(base_path, default_profile)
    return tools


# Common profile parameter schema
PROFILE_PARAM = {
    "type": "string",
    "description": "The profile name (folder in profiles). If not specified, uses the default profile. Use list_profiles to see available profiles."
}

PERIOD_PARAM = {
    "type": "string",
    "enum": ["week", "fortnight", "month", "quarter", "year"],
    "description": "Period to express amounts in"
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available FIRE planning tools."""
    return [
        Tool(
            name="list_profiles",
            description="List all available FIRE planning profiles. Use this to see which profiles are available and their basic info.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reload_profiles",
            description="Reload all profiles from disk. Use this after adding, modifying, or removing profile state.json files to refresh the cache without restarting the server.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="get_profile_overview",
            description="Get an overview of the profile including residency settings, income streams, assets, mortgage and FIRE settings. Use this first to understand the plan.",
            inputSchema={
                "type": "object",
                "properties": {
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_net_income_breakdown",
            description="Get the income statement: gross income per stream, salary packaging and sacrifice, taxable income, income tax, Medicare levy, surcharge, HELP repayment, take-home pay and super.",
            inputSchema={
                "type": "object",
                "properties": {
                    "period": {**PERIOD_PARAM, "description": "Period to express amounts in (default year)"},
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_cash_flow",
            description="Get spending by expense category and bank account, categories with no account mapping, and the remaining surplus.",
            inputSchema={
                "type": "object",
                "properties": {
                    "period": {**PERIOD_PARAM, "description": "Period to express amounts in (default month)"},
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_mortgage_simulation",
            description="Get the mortgage amortization schedule comparing the minimum repayment with the actual repayment, including payoff years and equity.",
            inputSchema={
                "type": "object",
                "properties": {
                    "year": {
                        "type": "integer",
                        "description": "Optional: year from today (0 = now). If omitted, returns the full schedule."
                    },
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_net_worth_projection",
            description="Get the 30-year net worth projection against the FIRE target, including mortgage balance and property value per year.",
            inputSchema={
                "type": "object",
                "properties": {
                    "year": {
                        "type": "integer",
                        "description": "Optional: year from today (0 = now). If omitted, returns the full projection."
                    },
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_fire_summary",
            description="Get the headline financial independence numbers: FIRE target, progress, surplus, savings rate and the year FIRE is reached.",
            inputSchema={
                "type": "object",
                "properties": {
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="compare_profiles",
            description="Compare two profiles and get analysis of which is closer to financial independence. Compares net cash position, tax, surplus, savings rate, FIRE target, final net worth and years to FIRE.",
            inputSchema={
                "type": "object",
                "properties": {
                    "profile1": {
                        "type": "string",
                        "description": "First profile name to compare"
                    },
                    "profile2": {
                        "type": "string",
                        "description": "Second profile name to compare"
                    },
                    "metrics": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Optional: specific metrics to compare. Options: 'net_cash_position', 'total_tax', 'surplus', 'savings_rate', 'fire_target', 'final_net_worth', 'years_to_fire'. If not specified, compares all metrics."
                    }
                },
                "required": ["profile1", "profile2"]
            }
        )
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        fp_tools = get_tools()
        profile = arguments.get("profile")

        if name == "list_profiles":
            result = fp_tools.list_profiles()
        elif name == "reload_profiles":
            result = fp_tools.reload_profiles()
        elif name == "get_profile_overview":
            result = fp_tools.get_profile_overview(profile)
        elif name == "get_net_income_breakdown":
            result = fp_tools.get_net_income_breakdown(arguments.get("period", "year"), profile)
        elif name == "get_cash_flow":
            result = fp_tools.get_cash_flow(arguments.get("period", "month"), profile)
        elif name == "get_mortgage_simulation":
            result = fp_tools.get_mortgage_simulation(arguments.get("year"), profile)
        elif name == "get_net_worth_projection":
            result = fp_tools.get_net_worth_projection(arguments.get("year"), profile)
        elif name == "get_fire_summary":
            result = fp_tools.get_fire_summary(profile)
        elif name == "compare_profiles":
            result = fp_tools.compare_profiles(
                arguments["profile1"],
                arguments["profile2"],
                arguments.get("metrics")
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    # stdout carries the protocol
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
