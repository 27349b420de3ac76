from fastapi import APIRouter, Depends, Response
from garage.api.deps import ADMIN, ENGINEER, get_sponsor_directory, require_role
from garage.schemas.sponsors import (
    DirectorySponsorCreate, DirectorySponsorResponse, DirectorySponsorsResponse, DirectorySponsorUpdate,
)
from garage.services.sponsors import SponsorDirectory

router = APIRouter()
readers = [Depends(require_role(ADMIN, ENGINEER))]
admins = [Depends(require_role(ADMIN))]

@router.get("", response_model=DirectorySponsorsResponse, dependencies=readers)
def list_sponsors(directory: SponsorDirectory = Depends(get_sponsor_directory)):
    return {"sponsors": directory.list()}

@router.get("/{sponsor_id}", response_model=DirectorySponsorResponse, dependencies=readers)
def get_sponsor(sponsor_id: str, directory: SponsorDirectory = Depends(get_sponsor_directory)):
    return {"sponsor": directory.get(sponsor_id)}

@router.post("", status_code=201, response_model=DirectorySponsorResponse, dependencies=admins)
def create_sponsor(body: DirectorySponsorCreate, directory: SponsorDirectory = Depends(get_sponsor_directory)):
    return {"sponsor": directory.create(body.name, body.date)}

@router.put("/{sponsor_id}", response_model=DirectorySponsorResponse, dependencies=admins)
def update_sponsor(sponsor_id: str, body: DirectorySponsorUpdate,
                   directory: SponsorDirectory = Depends(get_sponsor_directory)):
    return {"sponsor": directory.update(sponsor_id, body.name, body.date)}

@router.delete("/{sponsor_id}", status_code=204, dependencies=admins)
def delete_sponsor(sponsor_id: str, directory: SponsorDirectory = Depends(get_sponsor_directory)):
    directory.delete(sponsor_id)
    return Response(status_code=204)
