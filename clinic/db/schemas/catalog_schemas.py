# clinic/db/schemas/catalog_schemas.py
from pydantic import BaseModel, Field, ConfigDict
from decimal import Decimal
from typing import Optional


class TestBase(BaseModel):
    __test__ = False  # not a pytest class

    test_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class TestCreate(TestBase):
    pass


class TestUpdate(BaseModel):
    __test__ = False

    test_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class TestResponse(TestBase):
    model_config = ConfigDict(from_attributes=True)

    test_id: int


class MedicationBase(BaseModel):
    medication_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    price_per_unit: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class MedicationCreate(MedicationBase):
    pass


class MedicationUpdate(BaseModel):
    medication_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    price_per_unit: Optional[Decimal] = Field(
        None, ge=0, max_digits=10, decimal_places=2
    )


class MedicationResponse(MedicationBase):
    model_config = ConfigDict(from_attributes=True)

    medication_id: int
