from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Pacing:
    """Presentation delays (milliseconds) attached to status updates.

    The surface waits delay_ms before showing an update. The controller
    resolves the whole turn up front, so these values only shape how the
    turn is replayed on screen.
    """

    turn_switch_ms: int = 500  # normal square -> robot
    skip_switch_ms: int = 1500  # frozen turn -> other side
    answer_switch_ms: int = 1200  # answered -> robot
    notice_switch_ms: int = 1500  # question failed to load -> other side
    robot_think_ms: int = 900
    robot_move_ms: int = 800
    robot_question_ms: int = 700
    robot_answer_ms: int = 1200
    robot_end_ms: int = 800
    game_over_ms: int = 800


DEFAULT_PACING = Pacing()
