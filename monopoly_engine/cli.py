"""
Minimal CLI for simulating Monopoly games.

Runs a full game between automated agents and prints standings. Flags
override the MONOPOLY_* environment settings.
"""

import argparse
import logging
from typing import List, Optional

from monopoly_engine.agents import Agent, GreedyAgent, RandomAgent
from monopoly_engine.bank import net_worth
from monopoly_engine.board import get_space
from monopoly_engine.config import AgentType, EngineSettings, get_settings
from monopoly_engine.engine import GameEngine
from monopoly_engine.events import GameEvent
from monopoly_engine.game_logger import GameLogger
from monopoly_engine.models import GameState
from monopoly_engine.runner import GameRunner
from monopoly_engine.scenario import apply_scenario, load_scenario
from monopoly_engine.summary import format_event

PLAYER_NAMES = ["Alice", "Bob", "Charlie", "Diana", "Eve", "Frank", "Grace", "Hank"]


def print_game_state(state: GameState) -> None:
    """Print current game state."""
    print("\n" + "=" * 60)
    print(f"TURN {state.turn_number}")
    print("=" * 60)

    for player in state.players:
        if player.is_bankrupt:
            status = "BANKRUPT"
        elif player.in_jail:
            status = f"IN JAIL ({player.jail_turns} failed rolls)"
        else:
            status = f"at {get_space(player.position).name}"

        print(f"{player.name}: ${player.balance} | {len(player.properties)} properties | {status}")


def print_game_summary(state: GameState) -> None:
    """Print final game summary."""
    print("\n" + "=" * 60)
    print("GAME OVER" if state.is_game_over else "TURN LIMIT REACHED")
    print("=" * 60)

    if state.winner is not None:
        winner = next(p for p in state.players if p.id == state.winner)
        print(f"\nWinner: {winner.name}")
        print(f"Final Cash: ${winner.balance}")
        print(f"Properties Owned: {len(winner.properties)}")

    print("\nFinal Standings:")
    ranked = sorted(state.players, key=lambda p: net_worth(state, p.id), reverse=True)
    for player in ranked:
        status = "BANKRUPT" if player.is_bankrupt else f"${net_worth(state, player.id)}"
        print(f"  {player.name}: {status}")

    print(f"\nTotal Turns: {state.turn_number}")


def create_agents(state: GameState, agent_type: AgentType, seed: Optional[int]) -> List[Agent]:
    base_seed = seed if seed is not None else 0
    if agent_type == AgentType.RANDOM:
        return [RandomAgent(p.id, p.name, seed=base_seed + i) for i, p in enumerate(state.players)]
    return [GreedyAgent(p.id, p.name, seed=base_seed + i) for i, p in enumerate(state.players)]


def simulate_game(settings: EngineSettings, verbose: bool = True) -> GameState:
    """
    Simulate a complete game of Monopoly.

    Args:
        settings: Player count, agent type, seed, limits and log file
        verbose: Whether to print events and standings

    Returns:
        The final game state
    """
    engine = GameEngine(seed=settings.seed)
    state = engine.create_game(PLAYER_NAMES[: settings.num_players])
    if settings.scenario_file:
        state = apply_scenario(state, load_scenario(settings.scenario_file))

    agents = {agent.player_id: agent for agent in create_agents(state, settings.agent_type, settings.seed)}
    game_logger = GameLogger(settings.log_file) if settings.log_file else None

    def print_events(new_state: GameState, events: List[GameEvent]) -> None:
        for event in events:
            print(f"  {format_event(event, new_state)}")

    if verbose:
        print(f"Starting game with {settings.num_players} players using {settings.agent_type.value} agents")
        print(f"Seed: {settings.seed}")
        if game_logger:
            print(f"Logging to: {game_logger.log_file}")
        print_game_state(state)

    runner = GameRunner(
        engine,
        state,
        agents,
        max_turns=settings.max_turns,
        max_actions_per_turn=settings.max_actions_per_turn,
        max_failed_actions=settings.max_failed_actions,
        game_logger=game_logger,
        on_events=print_events if verbose else None,
    )
    final_state = runner.run()

    if verbose:
        print_game_summary(final_state)
        if game_logger:
            print(f"\nGame logged to: {game_logger.log_file}")
    return final_state


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate a Monopoly game between automated agents")
    parser.add_argument("--players", type=int, help="Number of players (2-8)")
    parser.add_argument("--agent", choices=[t.value for t in AgentType], help="Agent type for every player")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible games")
    parser.add_argument("--max-turns", type=int, help="Stop after this many turns")
    parser.add_argument("--scenario", help="JSON scenario file applied at setup")
    parser.add_argument("--log-file", help="Write a JSONL game log to this path")
    parser.add_argument("--log-level", help="Python logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--quiet", action="store_true", help="Only print errors")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {
        "num_players": args.players,
        "agent_type": args.agent,
        "seed": args.seed,
        "max_turns": args.max_turns,
        "scenario_file": args.scenario,
        "log_file": args.log_file,
        "log_level": args.log_level,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    # Command-line values take precedence over MONOPOLY_* environment variables
    settings = EngineSettings(**overrides) if overrides else get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    simulate_game(settings, verbose=not args.quiet)
    return 0
