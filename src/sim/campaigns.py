from __future__ import annotations
import random
from itertools import count
from typing import Callable, List, Optional, Sequence, Tuple

from src.core.models import Campaign, Endpoint, KillChainStep, OFFLINE
from src.core.scenarios import KillChainCatalog


class CampaignRegistry:
    """
    Dueña exclusiva del ciclo de vida de las campañas en curso.
    Toda la aleatoriedad sale del rng inyectado.
    """

    def __init__(
        self,
        catalog: KillChainCatalog,
        rng: random.Random,
        clock: Callable[[], str],
        *,
        spawn_probability: float = 0.03,
        advance_probability: float = 0.15,
    ) -> None:
        self.catalog = catalog
        self.rng = rng
        self.clock = clock
        self.spawn_probability = spawn_probability
        self.advance_probability = advance_probability
        self._live: List[Campaign] = []
        self._ids = count(1)

    @property
    def campaigns(self) -> Tuple[Campaign, ...]:
        return tuple(self._live)

    def trigger(self, endpoint_id: str, attack_type: str) -> Campaign:
        # no se valida el endpoint: si no existe, sus alertas se descartan en el tick
        steps = self.catalog.steps_for(attack_type)
        campaign = Campaign(
            id=f"camp-{next(self._ids):04d}",
            attack_type=attack_type,
            target_endpoint_id=endpoint_id,
            start_time=self.clock(),
            total_steps=len(steps),
        )
        self._live.append(campaign)
        return campaign

    def spawn_random(self, endpoints: Sequence[Endpoint]) -> Optional[Campaign]:
        if self.rng.random() >= self.spawn_probability:
            return None
        candidates = [e for e in endpoints if e.status != OFFLINE]
        if not candidates:
            return None
        target = self.rng.choice(candidates)
        attack_type = self.rng.choice(self.catalog.attack_types)
        return self.trigger(target.id, attack_type)

    def should_advance(self) -> bool:
        # cadencia irregular del atacante
        return self.rng.random() < self.advance_probability

    def advance(self, campaign: Campaign) -> Optional[KillChainStep]:
        steps = self.catalog.steps_for(campaign.attack_type)
        if campaign.step_index >= len(steps):
            campaign.active = False
            return None

        step = steps[campaign.step_index]
        campaign.step_index += 1
        if campaign.step_index >= len(steps):
            campaign.active = False
        return step

    def sweep(self) -> int:
        before = len(self._live)
        self._live = [c for c in self._live if c.active]
        return before - len(self._live)

    def clear(self) -> None:
        self._live = []

    def __len__(self) -> int:
        return len(self._live)
