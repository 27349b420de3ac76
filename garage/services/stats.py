from garage.schemas.stats import DriverStats
from garage.schemas.teams import Driver


def driver_stats(driver: Driver) -> DriverStats:
    results = driver.results
    races = len(results)
    total_points = float(sum(r.points for r in results))
    if not races:
        return DriverStats(races=0, avg_position=0.0, avg_points=0.0, best_position=None, total_points=0.0)
    return DriverStats(
        races=races,
        avg_position=sum(r.position for r in results) / races,
        avg_points=total_points / races,
        best_position=min(r.position for r in results),
        total_points=total_points,
    )
