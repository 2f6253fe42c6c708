"""Registry of named backend engines reachable through the gateway."""

from __future__ import annotations

import dataclasses

from codemind.exceptions import UnknownEngineError


@dataclasses.dataclass(frozen=True)
class Engine:
    engine_id: str
    name: str
    endpoint: str
    description: str


ENGINES: dict[str, Engine] = {
    engine.engine_id: engine
    for engine in (
        Engine("dise", "Dynamic Intent Scoring Engine", "/api/v1/scoring/score", "Lead scoring and intent analysis"),
        Engine(
            "ccas",
            "Contextual Channel Automation System",
            "/api/v1/enhanced/ccas/optimize",
            "Multi-channel optimization",
        ),
        Engine("ana", "Adaptive Negotiation Algorithm", "/api/v1/enhanced/ana/negotiate", "Strategy optimization"),
        Engine("lgm", "Lead Genome Mapping", "/api/v1/enhanced/lgm/analyze", "Behavioral analysis"),
        Engine("rlgf", "ROI-Locked Guarantee Framework", "/api/v1/enhanced/rlgf/guarantee", "Performance guarantees"),
    )
}


def get_engine(engine_id: str) -> Engine:
    try:
        return ENGINES[engine_id]
    except KeyError:
        raise UnknownEngineError(engine_id) from None
