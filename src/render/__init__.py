"""Render module for financial planning output display."""

from render.renderers import (
    BaseRenderer,
    NetIncomeRenderer,
    CashFlowRenderer,
    MortgageRenderer,
    NetWorthRenderer,
    RENDERER_REGISTRY,
)

__all__ = [
    'BaseRenderer',
    'NetIncomeRenderer',
    'CashFlowRenderer',
    'MortgageRenderer',
    'NetWorthRenderer',
    'RENDERER_REGISTRY',
]
