"""Database models for the species domain."""

from sqlalchemy import Column, String, Text
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from biocatalog.species.schema import Kingdom


class Species(SQLModel, table=True):
    """Represents a species record in the catalog."""

    __tablename__: str = "species"  # type: ignore[assignment]

    id: int | None = Field(default=None, primary_key=True)
    author: str = Field(foreign_key="profiles.id", index=True)  # Profile id of the creator

    scientific_name: str = Field(sa_column=Column(String(200), nullable=False, index=True))
    common_name: str | None = Field(default=None, sa_column=Column(String(200)))
    kingdom: Kingdom = Field(
        sa_column=Column(
            SAEnum(
                Kingdom,
                native_enum=False,
                length=16,
                values_callable=lambda kingdoms: [kingdom.value for kingdom in kingdoms],
            ),
            nullable=False,
        )
    )
    total_population: int | None = None
    image: str | None = Field(default=None, sa_column=Column(Text))
    description: str | None = Field(default=None, sa_column=Column(Text))

    def form_values(self) -> dict:
        """Field values used to prefill the edit form."""
        return {
            "scientific_name": self.scientific_name,
            "common_name": self.common_name,
            "kingdom": Kingdom(self.kingdom).value,
            "total_population": self.total_population,
            "image": self.image,
            "description": self.description,
        }
