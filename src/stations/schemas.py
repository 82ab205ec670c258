from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime

class StationBase(BaseModel):
    city: str = Field(..., min_length=1, max_length=255)
    station_name: str = Field(..., min_length=1, max_length=255)

class StationCreate(StationBase):
    station_id: str = Field(..., min_length=1, max_length=50)

    @validator('station_id')
    def normalize_station_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Station ID cannot be blank')
        return v

class StationUpdate(BaseModel):
    city: Optional[str] = Field(None, min_length=1, max_length=255)
    station_name: Optional[str] = Field(None, min_length=1, max_length=255)
    station_id: Optional[str] = Field(None, min_length=1, max_length=50)

class Station(StationBase):
    id: int
    station_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CityList(BaseModel):
    cities: List[str]
