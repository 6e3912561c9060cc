"""
JSONL logger for Monopoly game history.

Each line is one JSON record: a ``game_start`` header, one ``action`` record
per applied or rejected action with the events it produced, and a
``game_end`` record carrying the final serialized state.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from monopoly_engine.actions import BaseAction
from monopoly_engine.events import GameEvent
from monopoly_engine.models import GameState

logger = logging.getLogger(__name__)


class GameLogger:
    """Logger that writes game records to a JSONL file."""

    def __init__(self, log_file: Optional[str] = None):
        """
        Initialize game logger.

        Args:
            log_file: Path to log file. If None, generates timestamped filename.
        """
        if log_file is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = f"monopoly_game_{timestamp}.jsonl"

        self.log_file = log_file
        self.event_count = 0

        # Create/clear log file
        with open(self.log_file, "w", encoding="utf-8"):
            pass

    def log_event(self, event_type: str, **kwargs: Any) -> None:
        """
        Append one record to the log.

        Args:
            event_type: Record type (e.g., "game_start", "action", "game_end")
            **kwargs: JSON-serializable record data
        """
        record = {
            "event_id": self.event_count,
            "timestamp": datetime.now().isoformat(),
            "event_type": event_type,
            **kwargs,
        }
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(record) + "\n")
        self.event_count += 1

    def log_game_start(self, state: GameState, seed: Optional[int]) -> None:
        self.log_event(
            "game_start",
            seed=seed,
            players=[{"id": p.id, "name": p.name, "balance": p.balance} for p in state.players],
        )

    def log_action(
        self,
        state: GameState,
        player_id: str,
        action: Optional[BaseAction],
        success: bool,
        events: List[GameEvent],
        error: Optional[str] = None,
    ) -> None:
        """Record one engine call; ``action`` is None for automatic steps such as landing."""
        record: Dict[str, Any] = {
            "turn": state.turn_number,
            "player_id": player_id,
            "phase": state.turn_phase.value,
            "action": action.model_dump(mode="json") if action is not None else None,
            "success": success,
            "events": [event.model_dump(mode="json") for event in events],
        }
        if error:
            record["error"] = error
        self.log_event("action", **record)

    def log_game_end(self, state: GameState) -> None:
        self.log_event(
            "game_end",
            turn=state.turn_number,
            winner=state.winner,
            final_state=state.model_dump(mode="json"),
        )
        logger.info(f"Game log written to {self.log_file} ({self.event_count} records)")

    @staticmethod
    def read_records(log_file: str) -> List[Dict[str, Any]]:
        """Read every record back from a JSONL log."""
        with open(log_file, encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]
