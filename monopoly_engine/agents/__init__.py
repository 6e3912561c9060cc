from monopoly_engine.agents.base import Agent
from monopoly_engine.agents.greedy import GreedyAgent
from monopoly_engine.agents.random import RandomAgent

__all__ = [
    "Agent",
    "RandomAgent",
    "GreedyAgent",
]
