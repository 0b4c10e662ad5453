# compliance_hub/models/country.py
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from compliance_hub.core.database import Base


class Country(Base):
    __tablename__ = "countries"

    # ISO 3166 alpha-2 code, upper-cased on write
    country_code = Column(String(10), primary_key=True, index=True)
    country_name = Column(String(100), nullable=False)

    # Local titles for the CA-equivalent and CS-equivalent professions
    ca_type = Column(String(100), nullable=True)
    cs_type = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Country(code='{self.country_code}', name='{self.country_name}')>"
