# mspdesk/app/models.py
from sqlalchemy import Column, Integer, String, Date, DateTime, Text, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .db import Base


class Client(Base):
    __tablename__ = "clients"
    id = Column(Integer, primary_key=True)
    name = Column(String, index=True, nullable=False)
    contact_person = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    networks = relationship("Network", back_populates="client", cascade="all, delete-orphan")
    printers = relationship("Printer", back_populates="client", cascade="all, delete-orphan")
    assets = relationship("Asset", back_populates="client", cascade="all, delete-orphan")
    applications = relationship("Application", back_populates="client", cascade="all, delete-orphan")
    packages = relationship("InboundPackage", back_populates="client", cascade="all, delete-orphan")
    mapping = relationship("CustomerMapping", back_populates="client", uselist=False,
                           cascade="all, delete-orphan")


# LAN / WAN documentation, each with its subnets
class Network(Base):
    __tablename__ = "networks"
    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), index=True, nullable=False)
    network_type = Column(String, index=True, nullable=False, default="LAN")
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    client = relationship("Client", back_populates="networks")
    subnets = relationship("Subnet", back_populates="network", cascade="all, delete-orphan",
                           order_by="Subnet.id")


class Subnet(Base):
    __tablename__ = "subnets"
    id = Column(Integer, primary_key=True)
    network_id = Column(Integer, ForeignKey("networks.id"), index=True, nullable=False)
    subnet_address = Column(String, nullable=False)
    gateway = Column(String, nullable=True)
    dns = Column(JSON, nullable=False, default=list)
    dhcp_range = Column(String, nullable=True)
    vlan = Column(Integer, nullable=False, default=1)

    network = relationship("Network", back_populates="subnets")


class Printer(Base):
    __tablename__ = "printers"
    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), index=True, nullable=False)
    location = Column(String, nullable=False)
    ip_address = Column(String, nullable=True)
    vendor = Column(String, nullable=True)
    model = Column(String, nullable=True)
    print_deploy_info = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    client = relationship("Client", back_populates="printers")


class Asset(Base):
    __tablename__ = "assets"
    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    type = Column(String, nullable=True)
    model = Column(String, nullable=True)
    serial_number = Column(String, nullable=True)
    purchase_date = Column(Date, nullable=True)
    warranty_expiry = Column(Date, nullable=True)
    location = Column(String, nullable=True)
    status = Column(String, nullable=False, default="ACTIVE")
    assigned_to = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    client = relationship("Client", back_populates="assets")


class Application(Base):
    __tablename__ = "applications"
    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    vendor = Column(String, nullable=True)
    version = Column(String, nullable=True)
    license_type = Column(String, nullable=True)
    expiry_date = Column(Date, nullable=True)
    installation_path = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    support_url = Column(String, nullable=True)
    critical = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    client = relationship("Client", back_populates="applications")


# status tier is derived from expected_date on every read, never stored
class InboundPackage(Base):
    __tablename__ = "inbound_packages"
    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), index=True, nullable=False)
    package_type = Column(String, index=True, nullable=False)
    received_by = Column(String, nullable=False)
    ticket_id = Column(String, nullable=True)
    serial_number = Column(String, index=True, nullable=True)
    received_date = Column(DateTime(timezone=True), nullable=False)
    expected_date = Column(Date, index=True, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    completed_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    client = relationship("Client", back_populates="packages")


class ActivityLog(Base):
    __tablename__ = "activity_logs"
    id = Column(Integer, primary_key=True)
    actor = Column(String, nullable=False)
    action_type = Column(String, index=True, nullable=False)
    resource_type = Column(String, index=True, nullable=False)
    resource_id = Column(Integer, nullable=True)
    details = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


# single-row API settings for the ticketing system
class TicketingSettings(Base):
    __tablename__ = "ticketing_settings"
    id = Column(Integer, primary_key=True)
    api_key = Column(String, nullable=False)
    api_url = Column(String, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class CustomerMapping(Base):
    __tablename__ = "customer_mappings"
    id = Column(Integer, primary_key=True)
    client_id = Column(Integer, ForeignKey("clients.id"), unique=True, nullable=False)
    ticketing_customer_id = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    client = relationship("Client", back_populates="mapping")
