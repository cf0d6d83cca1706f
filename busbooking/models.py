from sqlalchemy import Column, Integer, BigInteger, String, Boolean, DateTime, Text, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from busbooking.database import Base

# SQLite only auto-increments INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer, "sqlite")

# ================================
# Users & Roles
# ================================
class User(Base):
    __tablename__ = "users"

    id = Column(IdType, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user_roles = relationship("UserHasRole", back_populates="user")

class Role(Base):
    __tablename__ = "roles"

    id = Column(IdType, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user_roles = relationship("UserHasRole", back_populates="role")

class UserHasRole(Base):
    __tablename__ = "user_has_roles"

    id = Column(IdType, primary_key=True, index=True)
    user_id = Column(IdType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role_id = Column(IdType, ForeignKey("roles.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="user_roles")
    role = relationship("Role", back_populates="user_roles")

# ================================
# Cities, Stations & Routes
# ================================
class City(Base):
    __tablename__ = "cities"

    id = Column(IdType, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    country_code = Column(String(2), default="SY")
    latitude = Column(Numeric(10, 6))
    longitude = Column(Numeric(10, 6))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    stations = relationship("Station", back_populates="city")

class Station(Base):
    __tablename__ = "stations"

    id = Column(IdType, primary_key=True, index=True)
    city_id = Column(IdType, ForeignKey("cities.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    city = relationship("City", back_populates="stations")

class Route(Base):
    __tablename__ = "routes"
    __table_args__ = (
        UniqueConstraint("from_city_id", "to_city_id", name="uq_routes_city_pair"),
    )

    id = Column(IdType, primary_key=True, index=True)
    from_city_id = Column(IdType, ForeignKey("cities.id"), nullable=False, index=True)
    to_city_id = Column(IdType, ForeignKey("cities.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    from_city = relationship("City", foreign_keys=[from_city_id])
    to_city = relationship("City", foreign_keys=[to_city_id])
    trips = relationship("Trip", back_populates="route")

# ================================
# Companies & Transport Types
# ================================
class Company(Base):
    __tablename__ = "transport_companies"

    id = Column(IdType, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255))
    phone = Column(String(50))
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    trips = relationship("Trip", back_populates="company")

class TransportType(Base):
    __tablename__ = "transport_types"

    id = Column(IdType, primary_key=True, index=True)
    code = Column(String(20), unique=True, nullable=False)
    name = Column(String(100), nullable=False)

# ================================
# Trips & Fares
# ================================
class Trip(Base):
    __tablename__ = "trips"

    id = Column(IdType, primary_key=True, index=True)
    route_id = Column(IdType, ForeignKey("routes.id"), nullable=False, index=True)
    company_id = Column(IdType, ForeignKey("transport_companies.id"), nullable=False, index=True)
    transport_type_id = Column(IdType, ForeignKey("transport_types.id"), nullable=False)
    departure_station_id = Column(IdType, ForeignKey("stations.id"), nullable=False)
    arrival_station_id = Column(IdType, ForeignKey("stations.id"), nullable=False)
    # naive local wall-clock time, see busbooking.trips.validation.to_local_naive
    departure_time = Column(DateTime, nullable=False, index=True)
    arrival_time = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer)
    seats_total = Column(Integer, nullable=False)
    seats_available = Column(Integer, nullable=False)
    status = Column(String(50), default="scheduled")
    bus_number = Column(String(50))
    driver_name = Column(String(255))
    equipment = Column(Text)
    cancellation_policy = Column(Text)
    extra_info = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    route = relationship("Route", back_populates="trips")
    company = relationship("Company", back_populates="trips")
    transport_type = relationship("TransportType")
    departure_station = relationship("Station", foreign_keys=[departure_station_id])
    arrival_station = relationship("Station", foreign_keys=[arrival_station_id])
    fares = relationship("Fare", back_populates="trip", cascade="all, delete-orphan", passive_deletes=True)

class Fare(Base):
    __tablename__ = "trip_fares"

    id = Column(IdType, primary_key=True, index=True)
    trip_id = Column(IdType, ForeignKey("trips.id", ondelete="CASCADE"), unique=True, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="SYP")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    trip = relationship("Trip", back_populates="fares")
