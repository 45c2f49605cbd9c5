from enum import Enum


class Side(str, Enum):
    PLAYER = "PLAYER"
    ROBOT = "ROBOT"


class SquareType(str, Enum):
    NORMAL = "NORMAL"
    LADDER = "LADDER"
    SNAKE = "SNAKE"
    BONUS = "BONUS"
    PENALTY = "PENALTY"
    FREEZE = "FREEZE"


# placement order used by the board generator
SPECIAL_KINDS = (
    SquareType.LADDER,
    SquareType.SNAKE,
    SquareType.BONUS,
    SquareType.PENALTY,
    SquareType.FREEZE,
)


class Phase(str, Enum):
    PLAYER_TURN = "PLAYER_TURN"
    PLAYER_AWAITING_ANSWER = "PLAYER_AWAITING_ANSWER"
    ROBOT_TURN = "ROBOT_TURN"
    ROBOT_ANSWERING = "ROBOT_ANSWERING"
    GAME_OVER = "GAME_OVER"


class UpdateKind(str, Enum):
    """What a single status line shown by the render surface is about."""

    ROLLED = "ROLLED"
    MOVED = "MOVED"
    BOUNCED = "BOUNCED"
    SKIPPED = "SKIPPED"
    QUESTION = "QUESTION"
    CORRECT = "CORRECT"
    WRONG = "WRONG"
    NOTICE = "NOTICE"
    REPORTED = "REPORTED"
    TURN = "TURN"
    WIN = "WIN"


class ActionLogResult(str, Enum):
    APPLIED = "APPLIED"
    ILLEGAL = "ILLEGAL"
    ERROR = "ERROR"
