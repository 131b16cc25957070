# -*- coding: utf-8 -*-
"""Group event planner: event store, calendar queries and MCP tools."""
