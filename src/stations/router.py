from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from src.database import get_db
from src.auth.dependencies import require_admin
from src.exceptions import BookingSystemError
from src.stations.schemas import Station, StationCreate, StationUpdate, CityList
from src.stations.service import StationService

router = APIRouter()

@router.get("/", response_model=List[Station])
def get_stations(db: Session = Depends(get_db)):
    """List all stations"""
    return StationService.get_stations(db)

@router.get("/cities", response_model=CityList)
def get_cities(db: Session = Depends(get_db)):
    """List the distinct cities that have stations"""
    return CityList(cities=StationService.get_cities(db))

@router.get("/city/{city}", response_model=List[Station])
def get_stations_by_city(city: str, db: Session = Depends(get_db)):
    """List stations in a city"""
    return StationService.get_stations(db, city=city)

@router.get("/{station_id}", response_model=Station)
def get_station(station_id: str, db: Session = Depends(get_db)):
    try:
        return StationService.require_station(db, station_id)
    except BookingSystemError as e:
        raise e.to_http()

@router.post("/", response_model=Station, status_code=status.HTTP_201_CREATED)
def create_station(
    station: StationCreate,
    db: Session = Depends(get_db),
    admin=Depends(require_admin)
):
    """Create a station (admin only)"""
    try:
        return StationService.create_station(db, station)
    except BookingSystemError as e:
        raise e.to_http()

@router.put("/{station_id}", response_model=Station)
def update_station(
    station_id: str,
    station_update: StationUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_admin)
):
    """Update a station (admin only)"""
    try:
        return StationService.update_station(db, station_id, station_update)
    except BookingSystemError as e:
        raise e.to_http()

@router.delete("/{station_id}")
def delete_station(
    station_id: str,
    db: Session = Depends(get_db),
    admin=Depends(require_admin)
):
    """Delete a station (admin only)"""
    try:
        StationService.delete_station(db, station_id)
    except BookingSystemError as e:
        raise e.to_http()
    return {"message": "Station deleted"}
