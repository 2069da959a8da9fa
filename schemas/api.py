"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime
from models.base import SyncStatus


# ============================================================================
# Merged Products View
# ============================================================================

class ProductResponseData(BaseModel):
    """Product joined with its price, rendered with localized field names"""
    nombre: str                # consumer description
    clave: str                 # sku
    categoria: str             # sales category code
    modelo: str                # item series + series id
    costo: float = 0.0         # sell price
    costo2: float = 0.0        # total net price
    proveedor: str             # supplier
    cantidadSillas: int        # chairs per carton
    cantidadPorPaquete: int    # items per case
    descontinuado: str         # status
    alto: float                # unit height (mm)
    largo: float               # unit width (mm)
    ancho: float               # unit depth (mm)
    peso: float                # item weight (kg)

    class Config:
        json_schema_extra = {
            "example": {
                "nombre": "Dining Room Chair",
                "clave": "D123-01",
                "categoria": "DR",
                "modelo": " D123",
                "costo": 120.5,
                "costo2": 98.75,
                "proveedor": "Ashley Furniture",
                "cantidadSillas": 2,
                "cantidadPorPaquete": 1,
                "descontinuado": "Active",
                "alto": 990.0,
                "largo": 470.0,
                "ancho": 560.0,
                "peso": 9.5
            }
        }


# ============================================================================
# Health Check Schemas
# ============================================================================

class SyncRunInfo(BaseModel):
    """Latest sync run for one entity kind"""
    entity_kind: str
    status: SyncStatus
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    pages_fetched: int = 0
    records_loaded: int = 0
    total_records_reported: Optional[int] = None
    error_message: Optional[str] = None

    class Config:
        from_attributes = True
        use_enum_values = True


class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="Overall status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    store_connected: bool
    collections: Dict[str, int] = Field(default_factory=dict)
    last_runs: List[SyncRunInfo] = Field(default_factory=list)
