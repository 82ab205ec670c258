import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
from src.models import Station
from src.stations.schemas import StationCreate, StationUpdate
from src.exceptions import NotFound, ValidationError

logger = logging.getLogger(__name__)

class StationService:
    @staticmethod
    def get_station(db: Session, station_id: str) -> Optional[Station]:
        """Get station by its human-assigned code"""
        return db.query(Station).filter(Station.station_id == station_id).first()

    @staticmethod
    def require_station(db: Session, station_id: str) -> Station:
        """Resolve a station code or raise NotFound"""
        station = StationService.get_station(db, station_id)
        if station is None:
            raise NotFound(f"Station {station_id} not found")
        return station

    @staticmethod
    def get_stations(db: Session, city: Optional[str] = None) -> List[Station]:
        """List stations sorted by city then name"""
        query = db.query(Station)
        if city:
            query = query.filter(Station.city.ilike(city))
        return query.order_by(Station.city, Station.station_name).all()

    @staticmethod
    def get_cities(db: Session) -> List[str]:
        rows = db.query(Station.city).distinct().order_by(Station.city).all()
        return [row[0] for row in rows]

    @staticmethod
    def create_station(db: Session, station: StationCreate) -> Station:
        """Create a station, rejecting duplicate codes"""
        if StationService.get_station(db, station.station_id):
            raise ValidationError("Station ID already exists")

        db_station = Station(
            station_id=station.station_id,
            city=station.city,
            station_name=station.station_name
        )
        try:
            db.add(db_station)
            db.commit()
            db.refresh(db_station)
        except IntegrityError:
            db.rollback()
            raise ValidationError("Station ID already exists")

        logger.info("Created station %s (%s, %s)", db_station.station_id, db_station.station_name, db_station.city)
        return db_station

    @staticmethod
    def update_station(db: Session, station_id: str, station_update: StationUpdate) -> Station:
        db_station = StationService.require_station(db, station_id)

        update_data = station_update.dict(exclude_unset=True)
        new_code = update_data.get("station_id")
        if new_code and new_code != station_id and StationService.get_station(db, new_code):
            raise ValidationError("Station ID already exists")

        for field, value in update_data.items():
            if value is not None:
                setattr(db_station, field, value)

        try:
            db.commit()
            db.refresh(db_station)
        except IntegrityError:
            db.rollback()
            raise ValidationError("Station ID already exists")
        return db_station

    @staticmethod
    def delete_station(db: Session, station_id: str) -> None:
        """Delete a station; bookings keep their station codes"""
        db_station = StationService.require_station(db, station_id)
        db.delete(db_station)
        db.commit()
        logger.info("Deleted station %s", station_id)
