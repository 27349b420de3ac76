from typing import Optional
from pydantic import BaseModel


class DriverStats(BaseModel):
    races: int
    avg_position: float
    avg_points: float
    best_position: Optional[int] = None
    total_points: float


class DriverStatsResponse(BaseModel):
    stats: DriverStats
