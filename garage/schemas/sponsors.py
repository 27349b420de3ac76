import datetime as dt
from typing import List, Optional
from pydantic import BaseModel


class DirectorySponsor(BaseModel):
    id: str
    name: str
    date: dt.date


class DirectorySponsorCreate(BaseModel):
    name: str
    date: Optional[dt.date] = None


class DirectorySponsorUpdate(BaseModel):
    name: Optional[str] = None
    date: Optional[dt.date] = None


class DirectorySponsorResponse(BaseModel):
    sponsor: DirectorySponsor


class DirectorySponsorsResponse(BaseModel):
    sponsors: List[DirectorySponsor]
