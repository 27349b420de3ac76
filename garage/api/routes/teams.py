from fastapi import APIRouter, Depends, Response
from garage.api.deps import ADMIN, ENGINEER, get_team_service, require_role
from garage.schemas.requests import (
    AssignDriverRequest, BudgetPatch, CarCreate, ContributionCreate, DriverCreate, DriverResultCreate,
    InstallRequest, InventoryItemCreate, PurchaseRequest, SponsorCreate, TeamCreate, TeamUpdate,
    UninstallRequest,
)
from garage.schemas.stats import DriverStatsResponse
from garage.schemas.teams import TeamResponse, TeamsResponse
from garage.services.teams import TeamService

router = APIRouter()
staff = [Depends(require_role(ADMIN, ENGINEER))]
admins = [Depends(require_role(ADMIN))]


# -------- Teams (read: staff, write: admin) ----------
@router.get("", response_model=TeamsResponse, dependencies=staff)
def list_teams(svc: TeamService = Depends(get_team_service)):
    return {"teams": svc.list()}

@router.get("/{team_id}", response_model=TeamResponse, dependencies=staff)
def get_team(team_id: str, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.get(team_id)}

@router.post("", status_code=201, response_model=TeamResponse, dependencies=admins)
def create_team(body: TeamCreate, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.create(body.name, body.country)}

@router.put("/{team_id}", response_model=TeamResponse, dependencies=admins)
def update_team(team_id: str, body: TeamUpdate, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.update(team_id, body.name, body.country)}

@router.delete("/{team_id}", status_code=204, dependencies=admins)
def delete_team(team_id: str, svc: TeamService = Depends(get_team_service)):
    svc.delete(team_id)
    return Response(status_code=204)

# Kept so old clients get a clear 409 instead of a 404.
@router.patch("/{team_id}/budget", response_model=TeamResponse, dependencies=staff)
def set_budget(team_id: str, body: BudgetPatch, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.set_budget(team_id, body.total, body.spent)}


# -------- Sponsors & contributions ----------
@router.post("/{team_id}/sponsors", status_code=201, response_model=TeamResponse, dependencies=staff)
def add_sponsor(team_id: str, body: SponsorCreate, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.add_sponsor(team_id, body.name, body.description, body.contribution)}

@router.delete("/{team_id}/sponsors/{sponsor_id}", response_model=TeamResponse, dependencies=staff)
def remove_sponsor(team_id: str, sponsor_id: str, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.remove_sponsor(team_id, sponsor_id)}

@router.post("/{team_id}/contributions", status_code=201, response_model=TeamResponse, dependencies=staff)
def add_contribution(team_id: str, body: ContributionCreate, svc: TeamService = Depends(get_team_service)):
    team = svc.record_contribution(team_id, body.sponsor_id, body.amount, body.date, body.description)
    return {"team": team}

# Older clients post sponsor earnings here; admin only.
@router.post("/{team_id}/earnings", status_code=201, response_model=TeamResponse, dependencies=admins)
def add_earning(team_id: str, body: ContributionCreate, svc: TeamService = Depends(get_team_service)):
    team = svc.record_contribution(team_id, body.sponsor_id, body.amount, body.date, body.description)
    return {"team": team}


# -------- Drivers ----------
@router.post("/{team_id}/drivers", status_code=201, response_model=TeamResponse, dependencies=staff)
def add_driver(team_id: str, body: DriverCreate, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.add_driver(team_id, body.name, body.skill)}

@router.delete("/{team_id}/drivers/{driver_id}", response_model=TeamResponse, dependencies=staff)
def remove_driver(team_id: str, driver_id: str, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.remove_driver(team_id, driver_id)}

@router.post("/{team_id}/drivers/{driver_id}/results", status_code=201, response_model=TeamResponse,
             dependencies=staff)
def add_driver_result(team_id: str, driver_id: str, body: DriverResultCreate,
                      svc: TeamService = Depends(get_team_service)):
    team = svc.add_driver_result(team_id, driver_id, body.date, body.race, body.position, body.points)
    return {"team": team}

@router.get("/{team_id}/drivers/{driver_id}/stats", response_model=DriverStatsResponse, dependencies=staff)
def driver_stats(team_id: str, driver_id: str, svc: TeamService = Depends(get_team_service)):
    return {"stats": svc.get_driver_stats(team_id, driver_id)}


# -------- Store ----------
@router.post("/{team_id}/store/purchase", status_code=201, response_model=TeamResponse, dependencies=staff)
def purchase_part(team_id: str, body: PurchaseRequest, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.purchase_part(team_id, body.part_id, body.qty)}


# -------- Cars & assembly ----------
@router.post("/{team_id}/cars", status_code=201, response_model=TeamResponse, dependencies=staff)
def add_car(team_id: str, body: CarCreate, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.add_car(team_id, body.code, body.name)}

@router.delete("/{team_id}/cars/{car_id}", response_model=TeamResponse, dependencies=staff)
def remove_car(team_id: str, car_id: str, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.remove_car(team_id, car_id)}

@router.post("/{team_id}/cars/{car_id}/install", response_model=TeamResponse, dependencies=staff)
def install_part(team_id: str, car_id: str, body: InstallRequest, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.install_part(team_id, car_id, body.inventory_item_id)}

@router.post("/{team_id}/cars/{car_id}/uninstall", response_model=TeamResponse, dependencies=staff)
def uninstall_part(team_id: str, car_id: str, body: UninstallRequest,
                   svc: TeamService = Depends(get_team_service)):
    return {"team": svc.uninstall_part(team_id, car_id, body.installed_part_id)}

@router.post("/{team_id}/cars/{car_id}/assign-driver", response_model=TeamResponse, dependencies=staff)
def assign_driver(team_id: str, car_id: str, body: AssignDriverRequest,
                  svc: TeamService = Depends(get_team_service)):
    return {"team": svc.assign_car_driver(team_id, car_id, body.driver_id)}

@router.post("/{team_id}/cars/{car_id}/finalize", response_model=TeamResponse, dependencies=staff)
def finalize_car(team_id: str, car_id: str, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.finalize_car(team_id, car_id)}

@router.post("/{team_id}/cars/{car_id}/unfinalize", response_model=TeamResponse, dependencies=staff)
def unfinalize_car(team_id: str, car_id: str, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.unfinalize_car(team_id, car_id)}


# -------- Inventory ----------
@router.post("/{team_id}/inventory", status_code=201, response_model=TeamResponse, dependencies=staff)
def add_inventory_item(team_id: str, body: InventoryItemCreate, svc: TeamService = Depends(get_team_service)):
    team = svc.add_inventory_item(team_id, body.part_name, body.category, body.qty, body.unit_cost)
    return {"team": team}

@router.delete("/{team_id}/inventory/{item_id}", response_model=TeamResponse, dependencies=staff)
def remove_inventory_item(team_id: str, item_id: str, svc: TeamService = Depends(get_team_service)):
    return {"team": svc.remove_inventory_item(team_id, item_id)}
