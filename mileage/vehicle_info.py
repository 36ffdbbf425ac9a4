"""VehicleInfo class for vehicle identification."""

from typing import Optional


class VehicleInfo:
    """Vehicle identification as stored in the trip log."""

    def __init__(
        self,
        id: str,
        license_plate: Optional[str] = None,
        make: Optional[str] = None,
        model: Optional[str] = None,
    ):
        self.id = id
        self.license_plate = license_plate
        self.make = make
        self.model = model

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        if self.make and self.model:
            return f"{self.make} {self.model}"
        return self.license_plate or self.id
