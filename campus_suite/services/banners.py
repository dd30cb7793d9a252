"""Home-screen banners.

A banner slot is the (screen, position, priority) triple; each slot holds
at most one banner.
"""
from typing import Any, Dict, List, Optional

from campus_suite.core.errors import Conflict, ValidationFailed
from campus_suite.domain.content import BannerCreate, BannerUpdate, Position, Screen
from campus_suite.services.entities import EntityRepository

SLOT_FIELDS = ("screen", "position", "priority")


def _parse_filter(enum, value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return enum(value.upper()).value
    except ValueError:
        raise ValidationFailed(
            f"Invalid {enum.__name__.lower()}: {value}",
            details={"allowed": [member.value for member in enum]},
        )


class BannerService:
    def __init__(self, store):
        self.repository = EntityRepository(store, "banners")

    def _check_slot_free(self, slot: Dict[str, Any], exclude: Optional[int] = None) -> None:
        for banner in self.repository.find_by(**slot):
            if banner["banner_id"] != exclude:
                raise Conflict(
                    "Banner already exists for this screen, position, and priority. Please delete it first.",
                    details={**slot, "banner_id": banner["banner_id"]},
                )

    def create(self, request: BannerCreate) -> Dict[str, Any]:
        payload = request.model_dump(mode="json")
        self._check_slot_free({field: payload[field] for field in SLOT_FIELDS})
        return self.repository.create(payload)

    def list(
        self,
        screen: Optional[str] = None,
        position: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[Dict[str, Any]]:
        """Banners ordered by priority, newest first within a priority."""
        screen = _parse_filter(Screen, screen)
        position = _parse_filter(Position, position)
        banners = [
            b for b in self.repository.list()
            if (include_inactive or b.get("is_active", True))
            and (screen is None or b.get("screen") == screen)
            and (position is None or b.get("position") == position)
        ]
        banners.sort(key=lambda b: b.get("created_at", ""), reverse=True)
        banners.sort(key=lambda b: b.get("priority", 1))
        return banners

    def get(self, banner_id: int) -> Dict[str, Any]:
        return self.repository.get(banner_id)

    def update(self, banner_id: int, request: BannerUpdate) -> Dict[str, Any]:
        fields = request.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if not fields:
            return self.repository.get(banner_id)

        if any(field in fields for field in SLOT_FIELDS):
            current = self.repository.get(banner_id)
            slot = {field: fields.get(field, current.get(field)) for field in SLOT_FIELDS}
            self._check_slot_free(slot, exclude=banner_id)

        return self.repository.update(banner_id, fields)

    def delete(self, banner_id: int) -> Dict[str, Any]:
        return self.repository.delete(banner_id)
