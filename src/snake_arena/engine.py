"""Tick engine: the authoritative state machine of one game."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

import numpy as np

from snake_arena import rules
from snake_arena.ai.heuristic import Agent, HeuristicAgent
from snake_arena.config import GameConfig
from snake_arena.food import Food, FoodSpawner
from snake_arena.snake import Direction, Position, Snake
from snake_arena.state import GameState, GameStatus

logger = logging.getLogger(__name__)

MIN_SNAKE_LENGTH = 3

Observer = Callable[[GameState], None]


class GameEngine:
    """Step-based engine for one human snake against AI snakes.

    The engine privately owns every snake and food. Each call to
    :meth:`step` advances the game by one tick while it is playing; every
    tick and every state-changing command hands a fresh, frozen
    :class:`GameState` to the registered observers.

    *agents* maps AI snake ids to custom controllers; AI snakes without an
    entry get a :class:`HeuristicAgent` of their configured tier. All
    randomness (food placement and AI noise) is drawn from *rng*, seeded
    from ``config.seed`` unless given.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        rng: np.random.Generator | None = None,
        agents: Mapping[str, Agent] | None = None,
        on_state_change: Observer | None = None,
    ) -> None:
        cfg = config or GameConfig()
        self.config = cfg
        self.rng = rng if rng is not None else np.random.default_rng(cfg.seed)
        self._food_spawner = FoodSpawner(
            cfg.board_width, cfg.board_height,
            target=cfg.food_count, rng=self.rng,
        )
        self._observers: list[Observer] = []
        self._skins: dict[str, str | None] = {}

        self._agents: dict[str, Agent] = {}
        overrides = dict(agents or {})
        for i, slot in enumerate(s for s in cfg.spawn_layout() if s.is_ai):
            agent = overrides.get(slot.snake_id)
            if agent is None:
                agent = HeuristicAgent(cfg, cfg.difficulty_for(i), rng=self.rng)
            self._agents[slot.snake_id] = agent

        self._snakes: list[Snake] = []
        self._foods: list[Food] = []
        self._status = GameStatus.WAITING
        self._winner: str | None = None
        self._tick = 0
        self._initialize()

        if on_state_change is not None:
            self._observers.append(on_state_change)
            self._emit()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def winner(self) -> str | None:
        return self._winner

    @property
    def tick(self) -> int:
        return self._tick

    def snapshot(self) -> GameState:
        """Return an immutable copy of the current state."""
        return GameState(
            snakes=tuple(s.snapshot() for s in self._snakes),
            foods=tuple(self._foods),
            status=self._status,
            config=self.config,
            winner=self._winner,
            tick=self._tick,
        )

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register *observer*; returns a callable that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Enter the playing state from waiting or paused."""
        if self._status not in (GameStatus.WAITING, GameStatus.PAUSED):
            logger.debug("start ignored in status %s.", self._status.value)
            return
        self._status = GameStatus.PLAYING
        logger.info("Game started at tick %d.", self._tick)
        self._emit()

    def pause(self) -> None:
        """Freeze a playing game."""
        if self._status != GameStatus.PLAYING:
            logger.debug("pause ignored in status %s.", self._status.value)
            return
        self._status = GameStatus.PAUSED
        logger.info("Game paused at tick %d.", self._tick)
        self._emit()

    def resume(self) -> None:
        """Continue a paused game."""
        if self._status == GameStatus.PAUSED:
            self.start()

    def reset(self) -> None:
        """Return to the starting layout in the waiting state."""
        self._initialize()
        logger.info("Game reset.")
        self._emit()

    def change_direction(self, snake_id: str, direction: Direction) -> bool:
        """Steer a living snake; reversals and unknown snakes are ignored.

        The new heading takes effect on the next tick. Returns True when
        the direction was changed; steering to the current heading is a
        no-op that emits nothing.
        """
        snake = self._find(snake_id)
        if snake is None or not snake.alive:
            logger.debug("Direction change for %r ignored.", snake_id)
            return False
        if direction == snake.direction or not snake.set_direction(direction):
            return False
        self._emit()
        return True

    def change_skin(self, snake_id: str, skin_id: str | None) -> bool:
        """Set the cosmetic skin of a snake; it survives resets."""
        snake = self._find(snake_id)
        if snake is None:
            return False
        snake.skin_id = skin_id
        self._skins[snake_id] = skin_id
        self._emit()
        return True

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def step(self) -> GameState:
        """Advance the game by one tick and return the new snapshot.

        Outside the playing state nothing changes and the current snapshot
        is returned without notifying observers.
        """
        if self._status != GameStatus.PLAYING:
            return self.snapshot()

        self._apply_agent_decisions()
        ate = self._advance_snakes()
        self._resolve_collisions(ate)
        self._settle_survivors(ate)
        self._food_spawner.replenish(
            self._foods, [s.body for s in self._snakes],
        )
        self._tick += 1

        alive = [s for s in self._snakes if s.alive]
        if len(alive) <= 1:
            self._finish(alive)
        return self._emit()

    def _apply_agent_decisions(self) -> None:
        """Let every living AI snake pick its heading for this tick."""
        view = self.snapshot()
        for snake, snake_view in zip(self._snakes, view.snakes, strict=True):
            if not (snake.is_ai and snake.alive):
                continue
            agent = self._agents.get(snake.id)
            if agent is None:
                continue
            direction = agent.decide(snake_view, view.foods, view.snakes)
            if direction not in rules.valid_directions(snake):
                logger.warning(
                    "Agent for %s chose invalid direction %r; keeping %s.",
                    snake.id, direction, snake.direction.name,
                )
                continue
            snake.direction = direction

    def _advance_snakes(self) -> dict[str, bool]:
        """Prepend each living snake's new head.

        Returns, per moved snake, whether the new head landed on food as it
        lay before this tick.
        """
        food_cells = {food.position for food in self._foods}
        ate: dict[str, bool] = {}
        for snake in self._snakes:
            if not snake.alive:
                continue
            new_head = snake.next_head()
            snake.body.appendleft(new_head)
            ate[snake.id] = new_head in food_cells
        return ate

    def _resolve_collisions(self, moved: Mapping[str, bool]) -> None:
        """Kill every moved snake whose provisional head collides.

        All verdicts are taken before anyone is marked dead or trimmed, so
        the outcome does not depend on roster order.
        """
        verdicts = [
            (snake, self._collision_cause(snake))
            for snake in self._snakes
            if snake.id in moved
        ]
        for snake, cause in verdicts:
            if cause is not None:
                self._kill_snake(snake, cause)

    def _collision_cause(self, snake: Snake) -> str | None:
        if rules.wall_collision(snake.head, self.config):
            return "wall"
        if rules.self_collision(snake):
            return "self"
        others = [other for other in self._snakes if other is not snake]
        if rules.snake_collision(snake, others):
            return "snake"
        return None

    def _settle_survivors(self, ate: Mapping[str, bool]) -> None:
        """Feed or trim each surviving snake, in roster order."""
        for snake in self._snakes:
            if not snake.alive or snake.id not in ate:
                continue
            food = self._food_at(snake.head) if ate[snake.id] else None
            if food is not None:
                snake.score += food.points
                self._foods.remove(food)
            elif len(snake.body) > MIN_SNAKE_LENGTH:
                snake.body.pop()

    def _kill_snake(self, snake: Snake, cause: str) -> None:
        """Mark a snake as dead; its provisional body stays on the board."""
        snake.alive = False
        logger.info(
            "Snake %s died (%s) at tick %d with score %d.",
            snake.id, cause, self._tick + 1, snake.score,
        )

    def _finish(self, alive: list[Snake]) -> None:
        self._status = GameStatus.GAME_OVER
        self._winner = alive[0].id if alive else None
        logger.info(
            "Game over at tick %d; winner: %s.",
            self._tick, self._winner or "none",
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _initialize(self) -> None:
        """Place snakes and food in their starting layout."""
        self._snakes = [
            Snake(
                slot.snake_id,
                slot.head,
                slot.direction,
                length=MIN_SNAKE_LENGTH,
                color=slot.color,
                is_ai=slot.is_ai,
                skin_id=self._skins.get(slot.snake_id, slot.skin_id),
            )
            for slot in self.config.spawn_layout()
        ]
        self._foods = []
        self._food_spawner.replenish(
            self._foods, [s.body for s in self._snakes],
        )
        self._status = GameStatus.WAITING
        self._winner = None
        self._tick = 0

    def _find(self, snake_id: str) -> Snake | None:
        for snake in self._snakes:
            if snake.id == snake_id:
                return snake
        return None

    def _food_at(self, position: Position) -> Food | None:
        for food in self._foods:
            if food.position == position:
                return food
        return None

    def _emit(self) -> GameState:
        state = self.snapshot()
        for observer in list(self._observers):
            observer(state)
        return state
