from __future__ import annotations


class RecommendationError(RuntimeError):
    pass


class NotFoundError(RecommendationError, LookupError):
    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class InvalidInputError(RecommendationError, ValueError):
    pass
