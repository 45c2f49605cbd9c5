from __future__ import annotations

from typing import TYPE_CHECKING

from ..models.enums import Phase

if TYPE_CHECKING:  # typing-only imports
    from ..models.session import GameSession
    from .core import TurnController


def robot_autoplay(controller: TurnController, sess: GameSession, max_chain: int = 4) -> tuple[int, GameSession]:
    """Play robot turns while the robot holds the turn.

    Contract:
    - Inputs: controller (has run_robot_turn(sess)); session; max_chain
    - Behavior: a robot turn always hands the turn back or ends the game, so
      this normally runs once; max_chain guards against a stuck state.
    - Output: (number of robot turns played, updated session).
    """
    played = 0
    cur = sess
    while played < max_chain and cur.state.phase == Phase.ROBOT_TURN:
        cur = controller.run_robot_turn(cur)
        played += 1
    return played, cur
