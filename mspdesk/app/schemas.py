# mspdesk/app/schemas.py
# Pydantic input models; a failing model blocks the request before any store call.
from datetime import date
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class _Stripped(BaseModel):
    @field_validator("*", mode="before")
    @classmethod
    def strip_strings(cls, v):
        return v.strip() if isinstance(v, str) else v


# ---------------------------
# Clients
# ---------------------------
class ClientIn(_Stripped):
    name: str = Field(..., min_length=1)
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


class ClientUpdate(_Stripped):
    name: Optional[str] = Field(None, min_length=1)
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


# ---------------------------
# Networks / subnets
# ---------------------------
class SubnetIn(_Stripped):
    subnet_address: str = Field(..., min_length=1)
    gateway: Optional[str] = None
    dns: list[str] = Field(default_factory=list)
    dhcp_range: Optional[str] = None
    vlan: int = 1

    @field_validator("dns")
    @classmethod
    def drop_blank_dns(cls, v):
        return [d.strip() for d in v if d and d.strip()]


class NetworkIn(_Stripped):
    name: str = Field(..., min_length=1)
    network_type: Literal["LAN", "WAN"] = "LAN"
    description: Optional[str] = None
    subnets: list[SubnetIn] = Field(default_factory=list)


class NetworkUpdate(_Stripped):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    subnets: list[SubnetIn] = Field(default_factory=list)


# ---------------------------
# Printers / assets / applications
# ---------------------------
class PrinterIn(_Stripped):
    location: str = Field(..., min_length=1)
    ip_address: Optional[str] = None
    vendor: Optional[str] = None
    model: Optional[str] = None
    print_deploy_info: Optional[str] = None


class AssetIn(_Stripped):
    name: str = Field(..., min_length=1)
    type: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[date] = None
    warranty_expiry: Optional[date] = None
    location: Optional[str] = None
    status: Literal["ACTIVE", "INACTIVE", "MAINTENANCE", "RETIRED"] = "ACTIVE"
    assigned_to: Optional[str] = None
    notes: Optional[str] = None


class ApplicationIn(_Stripped):
    name: str = Field(..., min_length=1)
    vendor: Optional[str] = None
    version: Optional[str] = None
    license_type: Optional[str] = None
    expiry_date: Optional[date] = None
    installation_path: Optional[str] = None
    notes: Optional[str] = None
    support_url: Optional[str] = None
    critical: bool = False


# ---------------------------
# Inbound packages
# ---------------------------
class PackageIn(_Stripped):
    client_id: Optional[int] = None   # taken from the client scope when posted under a client
    package_type: str = Field(..., min_length=1)
    received_by: str = Field(..., min_length=1)
    ticket_id: Optional[str] = None
    expected_date: date = Field(default_factory=date.today)
    serial_number: Optional[str] = None


class PackageUpdate(_Stripped):
    package_type: Optional[str] = Field(None, min_length=1)
    received_by: Optional[str] = Field(None, min_length=1)
    ticket_id: Optional[str] = None
    serial_number: Optional[str] = None


# ---------------------------
# Ticketing integration
# ---------------------------
class TicketingSettingsIn(_Stripped):
    api_key: str = Field(..., min_length=1)
    api_url: Optional[str] = None


class MappingIn(_Stripped):
    ticketing_customer_id: str = Field(..., min_length=1)

    @field_validator("ticketing_customer_id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        # customer ids come back from the ticketing API as integers
        return str(v) if isinstance(v, int) else v


# ---------------------------
# Relay
# ---------------------------
class RelayRequest(BaseModel):
    url: Optional[str] = None
    method: str = "GET"
    headers: dict[str, Any] = Field(default_factory=dict)
    body: Optional[object] = None
